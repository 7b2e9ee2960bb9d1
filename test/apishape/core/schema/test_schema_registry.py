# Purpose: SchemaRegistry naming, first-writer-wins deduplication and
#          reference resolution.

import logging

from apishape.core.schema.registry import (
    COMPONENTS_SCHEMAS,
    SchemaRegistry,
    sanitize_name,
    schema_ref,
)


def test_sanitize_strips_unsafe_characters():
    assert sanitize_name("Foo[Bar]") == "FooBar"
    assert sanitize_name("pkg.Foo-bar_1") == "pkg.Foo-bar_1"
    assert sanitize_name("Map[string]*Item") == "MapstringItem"
    assert sanitize_name("a b/c") == "abc"


def test_register_builds_prefixed_sanitized_name():
    reg = SchemaRegistry()
    name = reg.register("Query", "Filter[Int]", {"type": "object"})
    assert name == "QueryFilterInt"
    assert reg.get_components() == {"QueryFilterInt": {"type": "object"}}
    assert "QueryFilterInt" in reg and len(reg) == 1


def test_first_writer_wins(caplog):
    reg = SchemaRegistry()
    reg.register("", "Pet", {"type": "object", "title": "first"})

    # identical schema: silently accepted
    with caplog.at_level(logging.WARNING, logger="apishape.core.schema.registry"):
        assert reg.register("", "Pet", {"type": "object", "title": "first"}) == "Pet"
    assert not caplog.records

    # different schema under the same name: kept, but reported
    with caplog.at_level(logging.WARNING, logger="apishape.core.schema.registry"):
        assert reg.register("", "Pet", {"type": "string"}) == "Pet"
    assert reg.get_components()["Pet"] == {"type": "object", "title": "first"}
    assert any("Pet" in r.getMessage() for r in caplog.records)


def test_boolean_schemas_are_stored():
    reg = SchemaRegistry()
    reg.register("", "Anything", True)
    assert reg.get_components()["Anything"] is True
    reg.register("", "Anything", {"type": "object"})
    assert reg.get_components()["Anything"] is True


def test_resolve_ref():
    reg = SchemaRegistry()
    reg.register("", "Pet", {"type": "object"})
    assert schema_ref("Pet") == COMPONENTS_SCHEMAS + "Pet"
    assert reg.resolve_ref("#/components/schemas/Pet") == {"type": "object"}
    assert reg.resolve_ref("#/components/schemas/Missing") is None
    assert reg.resolve_ref("#/definitions/Pet") is None


def test_clear_and_snapshot():
    reg = SchemaRegistry()
    reg.register("", "A", {"type": "string"})
    snap = reg.snapshot()
    assert snap == {"components": {"schemas": {"A": {"type": "string"}}}}
    reg.clear()
    assert reg.get_components() == {}
    # snapshot is a copy
    assert snap["components"]["schemas"] == {"A": {"type": "string"}}
