"""Tests for MarkupPersistenceBridge."""

import json

import pytest

from blueprint_markup.core.errors import (
    DecodeError, ValidationError, NetworkError, NamedSaveNotFound
)
from blueprint_markup.services.markup_persistence import (
    MarkupPersistenceBridge, validate_save_name
)

from conftest import make_rect, make_text


class TestLiveMarkup:

    def test_open_empty_blueprint(self, bridge, blueprint):
        loaded, snapshot = bridge.open_blueprint(blueprint.id)
        assert loaded.id == "bp-1"
        assert loaded.job_id == "job-7"
        assert snapshot == ()

    def test_load_live_not_json_yields_empty(self, bridge, store, blueprint):
        store.save_live_markup(blueprint.id, "not json")
        assert bridge.load_live(blueprint.id) == ()

    def test_load_live_infinite_timestamp_yields_empty(self, bridge, store, blueprint):
        store.save_live_markup(blueprint.id, '[{"id": "x", "type": "text", "color": "#000", '
                                             '"strokeWidth": 1, "timestamp": Infinity, '
                                             '"startX": 0, "startY": 0, "text": "a"}]')
        assert bridge.load_live(blueprint.id) == ()

    def test_save_then_load_live(self, bridge, blueprint, sample_snapshot):
        result = bridge.save_live(blueprint.id, sample_snapshot)
        assert result.version == 1
        assert json.loads(result.live_markup)[0]['id'] == 's1'
        assert bridge.load_live(blueprint.id) == sample_snapshot

    def test_save_live_overwrites_without_version_check(self, bridge, blueprint):
        bridge.save_live(blueprint.id, (make_rect("first"),))
        second = bridge.save_live(blueprint.id, (make_rect("second"),))
        assert second.version == 2
        assert [e.id for e in bridge.load_live(blueprint.id)] == ["second"]

    def test_save_live_to_unknown_blueprint_raises_network_error(self, bridge):
        with pytest.raises(NetworkError):
            bridge.save_live("missing", ())

    def test_save_live_publishes_on_job_channel(self, bridge, channels, blueprint):
        events = []
        channels.subscribe("job-7", events.append)
        bridge.open_blueprint(blueprint.id)

        bridge.save_live(blueprint.id, (make_rect(),))

        assert len(events) == 1
        assert events[0]['type'] == 'markup_saved'
        assert events[0]['mode'] == 'live'
        assert events[0]['version'] == 1


class TestNamedSaves:

    def test_empty_name_raises_and_writes_nothing(self, bridge, blueprint):
        before = bridge.list_named(blueprint.id)
        with pytest.raises(ValidationError):
            bridge.save_named(blueprint.id, "", (make_rect(),))
        with pytest.raises(ValidationError):
            bridge.save_named(blueprint.id, "   ", (make_rect(),))
        assert bridge.list_named(blueprint.id) == before == []

    def test_save_named_trims_name(self, bridge, blueprint):
        save = bridge.save_named(blueprint.id, "  Rough-in  ", (make_rect(),), description="  ")
        assert save.name == "Rough-in"
        assert save.description is None

    def test_named_saves_are_independent_of_live(self, bridge, blueprint, sample_snapshot):
        bridge.save_named(blueprint.id, "Review", sample_snapshot, is_shared=True, owner_id="u-1")
        assert bridge.load_live(blueprint.id) == ()

        saves = bridge.list_named(blueprint.id)
        assert len(saves) == 1
        assert saves[0].is_shared
        assert saves[0].owner_id == "u-1"

    def test_load_named_returns_snapshot(self, bridge, blueprint, sample_snapshot):
        save = bridge.save_named(blueprint.id, "Review", sample_snapshot)
        assert bridge.load_named(save.id) == sample_snapshot

    def test_load_named_after_reopen(self, store, blueprint, sample_snapshot):
        save = MarkupPersistenceBridge(store).save_named(blueprint.id, "Review", sample_snapshot)

        fresh = MarkupPersistenceBridge(store)
        fresh.open_blueprint(blueprint.id)
        assert fresh.load_named(save.id) == sample_snapshot

    def test_unknown_save_raises(self, bridge):
        with pytest.raises(NamedSaveNotFound):
            bridge.load_named("nope")

    def test_malformed_named_save_raises_decode_error(self, bridge, store, blueprint):
        save = store.create_named_save(blueprint.id, "Broken", "not json")
        bridge.list_named(blueprint.id)
        with pytest.raises(DecodeError):
            bridge.load_named(save.id)
        assert bridge.get_named(save.id).name == "Broken"

    def test_list_named_most_recent_first(self, bridge, store, blueprint):
        first = bridge.save_named(blueprint.id, "First", ())
        second = bridge.save_named(blueprint.id, "Second", (make_text(),))

        # Force distinct update times regardless of clock resolution
        path = store.get_saves_dir(blueprint.id) / f"{first.id}.json"
        data = json.loads(path.read_text())
        data['updatedAt'] = "2020-01-01T00:00:00Z"
        path.write_text(json.dumps(data))

        assert [s.id for s in bridge.list_named(blueprint.id)] == [second.id, first.id]

    def test_save_named_publishes(self, bridge, channels, blueprint):
        events = []
        channels.subscribe("bp-1", events.append)
        save = bridge.save_named(blueprint.id, "Review", ())
        assert events == [{
            'type': 'markup_saved',
            'mode': 'named',
            'blueprintId': 'bp-1',
            'saveId': save.id,
            'name': 'Review',
            'isShared': False,
        }]


class TestValidateSaveName:

    def test_valid(self):
        assert validate_save_name(" Plan A ") == "Plan A"

    @pytest.mark.parametrize("name", ["", "  ", None])
    def test_invalid(self, name):
        with pytest.raises(ValidationError, match="name is required"):
            validate_save_name(name)
