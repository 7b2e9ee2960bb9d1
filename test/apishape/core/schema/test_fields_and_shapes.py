# Purpose: Validate field descriptors, the @shape decorator and descriptor
#          normalization (describe / ShapeInfo).

import pytest

from apishape.core.schema import (
    File,
    FileHeader,
    ListOf,
    MapOf,
    describe,
    field,
    shape,
    shape_name,
)
from apishape.core.schema.fields import FieldDescriptor, shape_fields


# ----------------------------- field() factory -----------------------------


def test_field_tags_from_keywords():
    f = field("integer", query="id", header="X-Id", form_data="id")
    assert isinstance(f, FieldDescriptor)
    assert f.tags == {"query": "id", "header": "X-Id", "formData": "id"}


def test_untagged_field_gets_implicit_json_name():
    class S:
        name = field("string")
        user_id = field("integer", path="id")

    assert S.name.tags == {"json": "name"}
    # an explicit tag suppresses the implicit json one
    assert S.user_id.tags == {"path": "id"}


def test_dash_tag_excludes_field_from_family():
    f = field("string", json="-", query="q")
    assert f.tag("json") is None
    assert f.has_tag("query")


def test_field_declaration_errors():
    with pytest.raises(ValueError):
        field("str")  # not a primitive name
    with pytest.raises(ValueError):
        field("string", collection_format="tsv")
    with pytest.raises(ValueError):
        field("string", tags={"body": "x"})
    with pytest.raises(ValueError):
        field()  # type_ required unless embedded
    with pytest.raises(TypeError):
        field(["string", 1])


def test_list_and_map_require_inner_type():
    with pytest.raises(ValueError):
        ListOf(None)
    with pytest.raises(ValueError):
        MapOf(None)


def test_descriptor_get_and_set_on_instances():
    class S:
        name = field("string")

    s = S()
    assert s.name is None
    s.name = "rex"
    assert s.name == "rex"
    assert isinstance(S.name, FieldDescriptor)


# ----------------------------- @shape decorator -----------------------------


def test_shape_decorator_variants():
    @shape
    class A:
        pass

    @shape("Custom")
    class B:
        pass

    @shape(name="Other", forbid_unknown=True, force_request_body=True)
    class C:
        pass

    class D:
        pass

    assert shape_name(A) == "A"
    assert shape_name(B) == "Custom"
    assert shape_name(C) == "Other"
    assert shape_name(D) == "D"
    assert C.__shape_forbid_unknown__ is True
    assert C.__force_request_body__ is True


def test_shape_decorator_rejects_two_names():
    with pytest.raises(ValueError):
        shape("A", name="B")


def test_shape_name_is_not_inherited():
    @shape("Base")
    class Base:
        pass

    class Child(Base):
        pass

    assert shape_name(Child) == "Child"


def test_shape_fields_keep_order_and_inherit():
    class Base:
        a = field("string")
        b = field("string")

    class Child(Base):
        c = field("integer")
        a = field("integer")

    names = [f.name for f in shape_fields(Child)]
    assert names == ["b", "c", "a"]
    assert shape_fields(Child)[-1].type_ == "integer"


# ----------------------------- describe() -----------------------------------


def test_describe_kinds():
    class Obj:
        x = field("string")

    assert describe(None).kind == "none"
    assert describe("string").kind == "primitive"
    assert describe(int).target == "integer"
    assert describe(ListOf("string")).is_collection
    assert describe(MapOf("string")).kind == "map"
    assert describe(File).is_file_handle
    assert describe(FileHeader).is_file_handle
    assert describe(Obj).is_object
    assert describe(Obj()).is_object


def test_has_tagged_fields_looks_into_embedded_shapes():
    class Paging:
        limit = field("integer", query="limit")

    class Req:
        paging = field(Paging, embedded=True)
        name = field("string")

    info = describe(Req)
    assert info.has_tagged_fields("query")
    assert info.has_tagged_fields("json")
    assert not info.has_tagged_fields("header")
    assert [f.name for f in info.flat_fields()] == ["limit", "name"]


def test_find_embedded_collection():
    class Items:
        items = field(ListOf("string"), embedded=True)

    class Wrapper:
        inner = field(Items, embedded=True)

    class Plain:
        items = field(ListOf("string"))

    assert describe(Items).find_embedded_collection() is Items.items
    assert describe(Wrapper).find_embedded_collection() is Items.items
    assert describe(Plain).find_embedded_collection() is None
