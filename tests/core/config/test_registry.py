from datetime import timedelta

from confapp.core.config.fields import FIELD_FLAG_CONFIG, build_registry
from confapp.core.config.registry import (
    Field,
    FieldRegistry,
    FieldType,
    flatten,
    unflatten,
)


def test_flatten_unflatten_roundtrip():
    nested = {"log": {"level": "info", "format": "text"}, "environment": "dev"}
    dotmap = flatten(nested)
    assert dotmap["log.level"] == "info"
    assert dotmap["environment"] == "dev"
    rebuilt = unflatten(dotmap)
    assert rebuilt == nested


def test_add_replaces_duplicate_in_place():
    registry = FieldRegistry(
        [Field(name="a"), Field(name="b", description="old"), Field(name="c")]
    )
    registry.add(Field(name="b", description="new"))

    assert len(registry) == 3
    assert registry.names() == ["a", "b", "c"]
    assert registry.get("b").description == "new"


def test_add_appends_new_fields_in_order():
    registry = FieldRegistry()
    registry.add(Field(name="z"), Field(name="a"))
    registry.add(Field(name="m"))
    assert registry.names() == ["z", "a", "m"]


def test_by_prefix_keeps_registry_order(sample_registry):
    selected = sample_registry.by_prefix(["log"])
    assert [f.name for f in selected] == ["log.level", "log.output"]


def test_by_prefix_multiple_prefixes_no_duplicates(sample_registry):
    selected = sample_registry.by_prefix(["update", "up", "ratio"])
    assert [f.name for f in selected] == ["ratio", "update.auto", "update.period"]


def test_by_prefix_empty_returns_everything(sample_registry):
    assert sample_registry.by_prefix([]) == list(sample_registry)
    assert sample_registry.by_prefix(None) == list(sample_registry)


def test_by_prefix_no_match(sample_registry):
    assert sample_registry.by_prefix(["nothing"]) == []


def test_grouped_sorted(sample_registry):
    grouped = sample_registry.grouped_sorted()
    assert [group for group, _ in grouped] == ["Application", "Network", "Runtime"]
    application = dict(grouped)["Application"]
    assert [f.name for f in application] == sorted(f.name for f in application)
    assert [f.name for f in dict(grouped)["Runtime"]] == ["ratio", "workers"]


def test_grouped_sorted_of_selection(sample_registry):
    grouped = sample_registry.grouped_sorted(sample_registry.by_prefix(["proxy"]))
    assert [(group, [f.name for f in fields]) for group, fields in grouped] == [
        ("Network", ["proxy.http"])
    ]


def test_lookup_by_name(sample_registry):
    lookup = sample_registry.lookup_by_name()
    assert set(lookup) == set(sample_registry.names())
    assert lookup["workers"].type is FieldType.INT
    assert "workers" in sample_registry
    assert "missing" not in sample_registry


def test_field_type_accepts():
    assert FieldType.INT.accepts(3)
    assert not FieldType.INT.accepts(True)
    assert FieldType.FLOAT.accepts(3)
    assert FieldType.BOOL.accepts(False)
    assert FieldType.DURATION.accepts(timedelta(seconds=1))
    assert not FieldType.STRING.accepts(1)


def test_field_env_name():
    assert Field(name="log.level").env_name() == "CONFAPP_LOG_LEVEL"
    assert Field(name="proxy.https").env_name("APP") == "APP_PROXY_HTTPS"


def test_build_registry_contains_application_fields():
    registry = build_registry()
    assert registry.names()[:2] == ["environment", "log.level"]
    assert "proxy.all" in registry
    assert "config" not in registry
    assert registry.get("environment").hidden
    assert registry.get("update.period").default == timedelta(minutes=15)


def test_resolve_default_calls_factory_each_time():
    calls = []

    def factory():
        calls.append(1)
        return f"value-{len(calls)}"

    field = Field(name="path", default_factory=factory)

    assert field.resolve_default() == "value-1"
    assert field.resolve_default() == "value-2"
    assert Field(name="plain", default=3).resolve_default() == 3


def test_config_flag_default_uses_current_config_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "elsewhere"))

    assert FIELD_FLAG_CONFIG.resolve_default() == str(
        tmp_path / "elsewhere" / "confapp" / "config.yaml"
    )
