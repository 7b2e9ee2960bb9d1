from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional

from .decorator import shape_name
from .fields import FILE_TYPES, PYTHON_TYPES, FieldDescriptor, ListOf, MapOf, shape_fields

ShapeKind = Literal["object", "list", "map", "file", "primitive", "none"]


@dataclass
class ShapeInfo:
    """
    Normalized view of a structural descriptor.

    Built once per descriptor so the extraction passes branch on `kind`
    instead of re-inspecting the raw object.
    """

    target: Any
    kind: ShapeKind
    name: str = ""
    fields: List[FieldDescriptor] = field(default_factory=list)
    description: str = ""
    title: str = ""
    forbid_unknown: bool = False
    force_request_body: bool = False
    force_json_body: bool = False

    @property
    def is_collection(self) -> bool:
        return self.kind in ("list", "map")

    @property
    def is_file_handle(self) -> bool:
        return self.kind == "file"

    @property
    def is_object(self) -> bool:
        return self.kind == "object"

    def flat_fields(self) -> List[FieldDescriptor]:
        """Top-level fields with embedded shapes flattened one level."""
        out: List[FieldDescriptor] = []
        for f in self.fields:
            if f.embedded and describe(f.type_).is_object:
                out.extend(describe(f.type_).fields)
            else:
                out.append(f)
        return out

    def has_tagged_fields(self, tag: str) -> bool:
        """True if any field, including embedded ones at any depth, carries `tag`."""
        for f in self.fields:
            if f.has_tag(tag):
                return True
            if f.embedded:
                inner = describe(f.type_)
                if inner.is_object and inner.has_tagged_fields(tag):
                    return True
        return False

    def find_embedded_collection(self) -> Optional[FieldDescriptor]:
        """First embedded ListOf/MapOf field, searching embedded shapes too."""
        for f in self.fields:
            if not f.embedded:
                continue
            inner = describe(f.type_)
            if inner.is_collection:
                return f
            if inner.is_object:
                found = inner.find_embedded_collection()
                if found is not None:
                    return found
        return None


def describe(obj: Any) -> ShapeInfo:
    """
    Normalize a descriptor: a shape class, an instance of one, ListOf/MapOf,
    a file marker, a primitive type name, or None.
    """
    if obj is None:
        return ShapeInfo(target=None, kind="none")
    if isinstance(obj, ListOf):
        return ShapeInfo(target=obj, kind="list")
    if isinstance(obj, MapOf):
        return ShapeInfo(target=obj, kind="map")
    if isinstance(obj, (str, list, tuple)):
        return ShapeInfo(target=obj, kind="primitive")
    if isinstance(obj, type) and obj in PYTHON_TYPES:
        return ShapeInfo(target=PYTHON_TYPES[obj], kind="primitive")
    cls = obj if isinstance(obj, type) else type(obj)
    if issubclass(cls, FILE_TYPES):
        return ShapeInfo(target=cls, kind="file", name=cls.__name__)
    return ShapeInfo(
        target=cls,
        kind="object",
        name=shape_name(cls),
        fields=shape_fields(cls),
        description=getattr(cls, "__shape_description__", "") or "",
        title=getattr(cls, "__shape_title__", "") or "",
        forbid_unknown=bool(getattr(cls, "__shape_forbid_unknown__", False)),
        force_request_body=bool(getattr(cls, "__force_request_body__", False)),
        force_json_body=bool(getattr(cls, "__force_json_body__", False)),
    )
