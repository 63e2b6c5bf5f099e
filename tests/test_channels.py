"""Tests for MarkupChannelRegistry."""

from blueprint_markup.services.markup_channels import MarkupChannelRegistry


class TestChannels:

    def test_publish_reaches_subscribers_on_channel_only(self):
        registry = MarkupChannelRegistry()
        a, b = [], []
        registry.subscribe("job-1", a.append)
        registry.subscribe("job-2", b.append)

        delivered = registry.publish("job-1", {"type": "markup_saved"})

        assert delivered == 1
        assert a == [{"type": "markup_saved"}]
        assert b == []

    def test_unsubscribe_callable(self):
        registry = MarkupChannelRegistry()
        events = []
        unsubscribe = registry.subscribe("job-1", events.append)
        unsubscribe()

        assert registry.publish("job-1", {}) == 0
        assert registry.sink_count("job-1") == 0

    def test_unsubscribe_unknown_channel_is_noop(self):
        MarkupChannelRegistry().unsubscribe("nothing", print)

    def test_failing_sink_is_dropped(self, caplog):
        registry = MarkupChannelRegistry()
        good = []

        def broken(event):
            raise ConnectionError("client went away")

        registry.subscribe("job-1", broken)
        registry.subscribe("job-1", good.append)

        assert registry.publish("job-1", {"n": 1}) == 1
        assert registry.sink_count("job-1") == 1
        assert "client went away" in caplog.text

        assert registry.publish("job-1", {"n": 2}) == 1
        assert good == [{"n": 1}, {"n": 2}]

    def test_publish_without_subscribers(self):
        assert MarkupChannelRegistry().publish("empty", {}) == 0
