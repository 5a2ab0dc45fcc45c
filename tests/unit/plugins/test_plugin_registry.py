import pytest
from pydantic import ValidationError

from src.app.plugins import EventBus, HookName, HookRegistry, PluginLoadError, PluginManifest

MANIFEST = {
    "name": "Mailer",
    "slug": "mailer",
    "version": "1.0.0",
    "description": "Emails",
    "author": "Acme Labs",
    "category": "email",
    "admin_ui": {"menu": "Mail"},
    "settings_schema": {
        "sender": {"type": "string", "label": "Sender", "required": True},
        "retries": {"type": "number", "label": "Retries", "default": 3},
    },
}


def test_manifest_keeps_unknown_keys():
    manifest = PluginManifest.model_validate(MANIFEST)

    assert manifest.model_dump()["admin_ui"] == {"menu": "Mail"}


@pytest.mark.parametrize(
    "override",
    [{"slug": "Bad Slug"}, {"version": "1.0"}, {"category": "games"}],
)
def test_manifest_rejects_invalid_fields(override):
    with pytest.raises(ValidationError):
        PluginManifest.model_validate({**MANIFEST, **override})


def test_manifest_settings_helpers():
    manifest = PluginManifest.model_validate(MANIFEST)

    assert manifest.default_config() == {"retries": 3}
    assert manifest.missing_settings({"retries": 3}) == ["sender"]
    assert manifest.missing_settings({"sender": "shop@acme.com"}) == []


def test_hook_decorator_registers_handler():
    registry = HookRegistry()

    @registry.hook("mailer", HookName.after_order_create, priority=5)
    def send(context, payload):
        return None

    handlers = registry.handlers_for("mailer", None, HookName.after_order_create)

    assert [h.handler for h in handlers] == [send]
    assert registry.handlers_for("mailer", None, HookName.before_order_create) == []


def test_unregister_and_clear():
    registry = HookRegistry()
    registry.register("mailer", HookName.after_order_create, print)
    registry.register("mailer", HookName.after_payment_success, print)

    registry.unregister("mailer", HookName.after_order_create)
    assert registry.handlers_for("mailer", None, HookName.after_order_create) == []
    assert len(registry.handlers_for("mailer", None, HookName.after_payment_success)) == 1

    registry.clear()
    assert registry.handlers_for("mailer", None, HookName.after_payment_success) == []


def test_load_handler_from_module():
    registry = HookRegistry()

    handler = registry.load_handler("mailer", "json:dumps")

    import json

    assert handler is json.dumps


def test_load_handler_from_plugin_file(tmp_path):
    plugin_root = tmp_path / "mailer" / "hooks"
    plugin_root.mkdir(parents=True)
    (plugin_root / "orders.py").write_text(
        "def on_order(context, payload):\n    return None\n"
    )
    registry = HookRegistry(plugin_dir=str(tmp_path))
    manifest = {"hooks": [{"name": "after_order_create", "handler": "hooks/orders.py:on_order"}]}

    handlers = registry.handlers_for("mailer", manifest, HookName.after_order_create)

    assert len(handlers) == 1
    assert handlers[0].handler.__name__ == "on_order"


def test_load_handler_rejects_path_escape(tmp_path):
    (tmp_path / "mailer").mkdir()
    (tmp_path / "evil.py").write_text("def run(context, payload):\n    return None\n")
    registry = HookRegistry(plugin_dir=str(tmp_path))

    with pytest.raises(PluginLoadError):
        registry.load_handler("mailer", "../evil.py:run")


@pytest.mark.parametrize("reference", ["no_colon", "json:", "json:not_there", "missing_mod_x:run"])
def test_load_handler_invalid_references(reference):
    with pytest.raises(PluginLoadError):
        HookRegistry().load_handler("mailer", reference)


@pytest.mark.asyncio
async def test_event_bus_isolates_failing_subscribers():
    bus = EventBus()
    received = []

    def broken(data):
        raise RuntimeError("boom")

    async def collect(data):
        received.append(data)

    bus.on("order.created", broken)
    bus.on("order.created", collect)
    await bus.emit("order.created", {"id": 1})

    bus.off("order.created", collect)
    await bus.emit("order.created", {"id": 2})

    assert received == [{"id": 1}]
