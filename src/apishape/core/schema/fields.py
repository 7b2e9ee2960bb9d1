from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

# Allowed JSON Schema primitive types (OAS 3.1 aligned, simplified)
PRIMITIVES = {"string", "integer", "number", "boolean", "object", "array", "null"}

# Field tag families: parameter locations plus body encodings.
LOCATION_TAGS = ("query", "path", "header", "cookie")
BODY_TAGS = ("json", "formData", "form")
KNOWN_TAGS = LOCATION_TAGS + BODY_TAGS

# Legacy collection formats and their (style, explode) equivalents.
COLLECTION_FORMATS: Dict[str, Tuple[str, bool]] = {
    "csv": ("form", False),
    "ssv": ("spaceDelimited", False),
    "pipes": ("pipeDelimited", False),
    "multi": ("form", True),
}


# ------------------------------------------------------------------------------
# Type markers
# ------------------------------------------------------------------------------


class File:
    """Marker type for an uploaded file stream."""


class FileHeader:
    """Marker type for an uploaded file with its multipart headers."""


FILE_TYPES = (File, FileHeader)

# Python builtins accepted as primitive type_ values.
PYTHON_TYPES: Dict[type, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
}


class ListOf:
    """Array of `item` (a primitive name, a shape class or another container)."""

    def __init__(self, item: Any):
        if item is None:
            raise ValueError("ListOf requires an item type.")
        self.item = item

    def __repr__(self) -> str:
        return f"ListOf({self.item!r})"


class MapOf:
    """String-keyed map of `value`."""

    def __init__(self, value: Any):
        if value is None:
            raise ValueError("MapOf requires a value type.")
        self.value = value

    def __repr__(self) -> str:
        return f"MapOf({self.value!r})"


# ------------------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------------------


def _as_type_list(type_: Optional[Union[str, Sequence[str]]]) -> List[str]:
    """Normalize a primitive type_ into a list[str] for validation and branching."""
    if type_ is None:
        return []
    if isinstance(type_, str):
        return [type_]
    if isinstance(type_, Sequence):
        vals = list(type_)
        if not vals:
            raise ValueError("type_ list must not be empty.")
        if not all(isinstance(t, str) for t in vals):
            raise TypeError("type_ list must contain only strings.")
        return vals
    raise TypeError("type_ must be a string, a list of strings, or None.")


def _validate_type(type_: Any) -> None:
    if type_ is None:
        return
    if isinstance(type_, (ListOf, MapOf)):
        return
    if isinstance(type_, type):
        # builtins, shape classes and file markers
        return
    type_list = _as_type_list(type_)
    unknown = [t for t in type_list if t not in PRIMITIVES]
    if unknown:
        raise ValueError(
            f"Invalid type_ entries: {unknown}. Allowed: {sorted(PRIMITIVES)}"
        )


# ------------------------------------------------------------------------------
# FieldDescriptor
# ------------------------------------------------------------------------------


class FieldDescriptor:
    """
    Descriptor carrying the structural metadata of one field of a shape.

    - `tags` maps a tag family ("query", "path", "header", "cookie", "json",
      "formData", "form") to the property name used in that family.
      A value of "-" excludes the field from the family.
    - A field declared without any tag is a plain JSON body field named after
      its attribute.
    - `embedded=True` flattens the fields of a nested shape into the owner,
      or marks a ListOf/MapOf field as the owner's collection body.
    """

    def __init__(
        self,
        type_: Any = None,
        *,
        tags: Optional[Dict[str, str]] = None,
        description: str = "",
        required: bool = False,
        deprecated: bool = False,
        format_: Optional[str] = None,
        enum: Optional[List[Any]] = None,
        example: Optional[Any] = None,
        default: Any = None,
        collection_format: Optional[str] = None,
        style: Optional[str] = None,
        explode: Optional[bool] = None,
        allow_empty_value: bool = False,
        embedded: bool = False,
        extra: Optional[Dict[str, Any]] = None,
    ):
        # store name later in __set_name__
        self.name: Optional[str] = None

        _validate_type(type_)
        if type_ is None and not embedded:
            raise ValueError("type_ is required unless the field is embedded.")
        if collection_format is not None and collection_format not in COLLECTION_FORMATS:
            raise ValueError(
                f"Unknown collection_format {collection_format!r}; "
                f"expected one of {sorted(COLLECTION_FORMATS)}."
            )
        unknown_tags = [t for t in (tags or {}) if t not in KNOWN_TAGS]
        if unknown_tags:
            raise ValueError(f"Unknown tag families: {unknown_tags}.")

        self.type_ = type_
        self.tags: Dict[str, str] = dict(tags or {})
        self.embedded = embedded
        self.meta: Dict[str, Any] = {
            "description": description,
            "required": required,
            "deprecated": deprecated,
            "format": format_,
            "enum": enum,
            "example": example,
            "default": default,
            "collection_format": collection_format,
            "style": style,
            "explode": explode,
            "allow_empty_value": allow_empty_value,
            "extra": dict(extra or {}),
        }

    # preserve declaration order and record the field name
    def __set_name__(self, owner, name):
        self.name = name
        fields = owner.__dict__.get("__shape_fields__")
        if fields is None:
            fields = []
            setattr(owner, "__shape_fields__", fields)
        fields.append(self)
        if not self.tags and not self.embedded:
            self.tags["json"] = name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return getattr(instance, f"__value__{self.name}", None)

    def __set__(self, instance, value):
        setattr(instance, f"__value__{self.name}", value)

    def tag(self, family: str) -> Optional[str]:
        """Property name for a tag family, or None if the field is not tagged."""
        value = self.tags.get(family)
        if value is None or value == "-":
            return None
        return value

    def has_tag(self, family: str) -> bool:
        return self.tag(family) is not None

    def __repr__(self) -> str:
        return f"FieldDescriptor({self.name!r}, {self.type_!r}, tags={self.tags!r})"


def field(
    type_: Any = None,
    *,
    query: Optional[str] = None,
    path: Optional[str] = None,
    header: Optional[str] = None,
    cookie: Optional[str] = None,
    json: Optional[str] = None,
    form: Optional[str] = None,
    form_data: Optional[str] = None,
    **kwargs,
) -> FieldDescriptor:
    """
    Public factory for FieldDescriptor.
    Examples:
        # JSON body field named after the attribute
        name = field("string", required=True, description="Username")

        # query parameter with a legacy collection format
        ids = field(ListOf("integer"), query="ids", collection_format="csv")

        # path parameter
        user_id = field("integer", path="id")

        # uploaded file in a form body
        avatar = field(File, form_data="avatar")
    """
    tags = dict(kwargs.pop("tags", None) or {})
    for family, value in (
        ("query", query),
        ("path", path),
        ("header", header),
        ("cookie", cookie),
        ("json", json),
        ("form", form),
        ("formData", form_data),
    ):
        if value is not None:
            tags[family] = value
    return FieldDescriptor(type_, tags=tags, **kwargs)


def shape_fields(cls: Any) -> List[FieldDescriptor]:
    """Fields declared on a shape class, base classes first."""
    if not isinstance(cls, type):
        return []
    out: List[FieldDescriptor] = []
    seen = set()
    for klass in reversed(cls.__mro__):
        for f in klass.__dict__.get("__shape_fields__", []):
            if f.name in seen:
                out = [x for x in out if x.name != f.name]
            seen.add(f.name)
            out.append(f)
    return out
