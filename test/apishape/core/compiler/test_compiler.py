# Purpose: Compiler orchestration: operation contexts, metadata, error
#          prefixes, path parameter validation and atomic insertion.

import pytest

from apishape.core.compiler import Compiler
from apishape.core.errors import (
    CompileError,
    ContextMismatchError,
    DuplicateOperationError,
    DuplicateParameterError,
    MalformedRequestError,
    SchemaAdapterError,
)
from apishape.core.path import OperationContext
from apishape.core.schema import field, shape


@shape("Item")
class Item:
    id = field("string", path="id")
    name = field("string", required=True)


def test_new_operation_context_normalizes_method_and_path():
    c = Compiler()
    oc = c.new_operation_context("PATCH", "/items/{id:[a-z]+}")
    assert oc.method == "patch"
    assert oc.path_pattern == "/items/{id}"
    assert oc.path_params == ["id"]
    assert repr(oc) == "OperationContext(PATCH /items/{id})"


def test_full_operation_with_metadata():
    c = Compiler(info={"title": "Items", "version": "0.1.0"})
    oc = c.new_operation_context("put", "/items/{id}")
    oc.set_summary("Replace item")
    oc.set_description("Replaces an item.")
    oc.set_id("replaceItem")
    oc.set_tags("Items", "Write")
    oc.set_deprecated()
    oc.add_security("apiKey")
    oc.add_security("oauth", "items:write")
    oc.add_request(Item)
    oc.add_response(Item)
    c.add_operation(oc)

    doc = c.to_dict()
    assert doc["info"] == {"title": "Items", "version": "0.1.0"}
    put = doc["paths"]["/items/{id}"]["put"]
    assert put["summary"] == "Replace item"
    assert put["description"] == "Replaces an item."
    assert put["operationId"] == "replaceItem"
    assert put["tags"] == ["Items", "Write"]
    assert put["deprecated"] is True
    assert put["security"] == [{"apiKey": []}, {"oauth": ["items:write"]}]
    assert put["parameters"] == [
        {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}
    ]
    assert put["requestBody"]["content"]["application/json"]["schema"] == {
        "$ref": "#/components/schemas/Item"
    }
    assert doc["components"]["schemas"]["Item"] == {
        "type": "object",
        "properties": {"name": {"type": "string"}},
        "required": ["name"],
    }


def test_duplicate_operation_is_case_insensitive():
    c = Compiler()
    c.add_operation(c.new_operation_context("get", "/items"))
    with pytest.raises(DuplicateOperationError) as exc:
        c.new_operation_context("GET", "/items")
    assert str(exc.value) == "operation already exists: get /items"


def test_duplicate_detected_at_insertion():
    c = Compiler()
    first = c.new_operation_context("get", "/items")
    second = c.new_operation_context("GET", "/items")
    c.add_operation(first)
    with pytest.raises(DuplicateOperationError) as exc:
        c.add_operation(second)
    assert str(exc.value).startswith("add operation GET /items: ")


def test_context_mismatch():
    c = Compiler()
    with pytest.raises(ContextMismatchError) as exc:
        c.add_operation(object())
    assert isinstance(exc.value, CompileError)
    assert "OperationContext expected" in str(exc.value)


def test_malformed_method_or_path():
    c = Compiler()
    with pytest.raises(MalformedRequestError):
        c.new_operation_context("CONNECT", "/items")
    with pytest.raises(MalformedRequestError):
        c.new_operation_context("GET", "items")


def test_undefined_path_parameter():
    c = Compiler()
    oc = c.new_operation_context("get", "/items/{id}/parts/{part}")
    oc.add_request(Item)
    with pytest.raises(MalformedRequestError) as exc:
        c.add_operation(oc)
    assert str(exc.value) == (
        "validate path params GET /items/{id}/parts/{part}: "
        "undefined path parameter: part"
    )


def test_missing_path_placeholder():
    c = Compiler()
    oc = c.new_operation_context("get", "/items")
    oc.add_request(Item)
    with pytest.raises(MalformedRequestError, match="missing path parameter placeholder in url: id"):
        c.add_operation(oc)


def test_failed_operation_is_not_inserted():
    class Dup:
        a = field("string", header="X-A")
        b = field("string", header="X-A")

    c = Compiler()
    oc = c.new_operation_context("post", "/items")
    oc.set_summary("will fail")
    oc.add_request(Dup)
    with pytest.raises(DuplicateParameterError) as exc:
        c.add_operation(oc)
    assert str(exc.value).startswith("setup request POST /items: ")
    assert c.document.operation("post", "/items") is None
    assert c.document.paths == {}
    # the context's own operation is left untouched
    assert oc.operation.parameters == []


def test_context_can_be_compiled_into_another_compiler():
    oc = Compiler().new_operation_context("get", "/items/{id}")
    oc.add_request(Item)
    oc.add_response(Item)

    a, b = Compiler(), Compiler()
    a.add_operation(oc)
    b.add_operation(oc)
    assert a.to_dict()["paths"] == b.to_dict()["paths"]
    assert len(a.document.operation("get", "/items/{id}").parameters) == 1


def test_forbidden_unknown_params_are_visible_after_compile():
    @shape(forbid_unknown=True)
    class Strict:
        q = field("string", query="q")

    c = Compiler()
    oc = c.new_operation_context("get", "/strict")
    oc.add_request(Strict)
    assert isinstance(oc, OperationContext)
    assert not oc.unknown_params_are_forbidden("query")

    op = c.add_operation(oc)
    assert oc.compiled is op
    assert oc.unknown_params_are_forbidden("query")
    assert oc.unknown_params_are_forbidden("header")


def test_adapter_failure_is_not_committed():
    @shape("[]")
    class Unnamed:
        x = field("string")

    class Holder:
        inner = field(Unnamed)

    c = Compiler()
    oc = c.new_operation_context("post", "/x")
    oc.add_request(Holder)
    with pytest.raises(SchemaAdapterError) as exc:
        c.add_operation(oc)
    assert isinstance(exc.value, CompileError)
    assert str(exc.value).startswith("setup request POST /x: ")
    assert "empty definition name" in str(exc.value)
    assert c.document.paths == {}
    assert oc.compiled is None


def test_duplicate_parameters_in_all_locations_are_reported_together():
    class Dups:
        a = field("string", query="id")
        b = field("string", query="id")
        c = field("string", header="X-A")
        d = field("string", header="X-A")

    c = Compiler()
    oc = c.new_operation_context("get", "/dups")
    oc.add_request(Dups)
    with pytest.raises(DuplicateParameterError) as exc:
        c.add_operation(oc)
    msg = str(exc.value)
    assert msg.startswith("setup request GET /dups: ")
    assert "parameter id in query is already defined" in msg
    assert "parameter X-A in header is already defined" in msg
    assert c.document.paths == {}
