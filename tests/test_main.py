"""Tests for command line parsing and store selection."""

from blueprint_markup.main import parse_args, create_bridge
from blueprint_markup.services.blueprint_api_client import BlueprintApiClient
from blueprint_markup.services.local_blueprint_store import LocalBlueprintStore


class TestParseArgs:

    def test_defaults(self):
        args = parse_args(["bp-1"])
        assert args.blueprint_id == "bp-1"
        assert args.api_url is None
        assert args.offline is None
        assert not args.debug

    def test_offline_with_image(self):
        args = parse_args(["bp-1", "--offline", "--image", "plan.png"])
        assert args.offline is True
        assert args.image == "plan.png"


class TestCreateBridge:

    def test_api_store_by_default(self):
        bridge = create_bridge(parse_args(["bp-1", "--api-url", "http://site:3000/"]))
        assert isinstance(bridge.store, BlueprintApiClient)
        assert bridge.store.base_url == "http://site:3000"

    def test_offline_registers_image(self, tmp_path):
        image = tmp_path / "plan.png"
        image.write_bytes(b"png")

        bridge = create_bridge(parse_args(["bp-5", "--offline", "--image", str(image)]))

        assert isinstance(bridge.store, LocalBlueprintStore)
        blueprint, snapshot = bridge.open_blueprint("bp-5")
        assert blueprint.source_image_url == str(image.resolve())
        assert snapshot == ()

    def test_offline_from_environment(self, monkeypatch):
        monkeypatch.setenv("BLUEPRINT_MARKUP_OFFLINE", "yes")
        bridge = create_bridge(parse_args(["bp-6"]))
        assert isinstance(bridge.store, LocalBlueprintStore)
        assert bridge.store.list_blueprints() == []
