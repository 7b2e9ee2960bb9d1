from .builder import (
    BuildOptions,
    BuiltSchema,
    PropContext,
    SchemaBuildError,
    SchemaBuilder,
    is_trivial,
)
from .decorator import shape, shape_name
from .descriptor import ShapeInfo, describe
from .fields import (
    COLLECTION_FORMATS,
    FieldDescriptor,
    File,
    FileHeader,
    ListOf,
    MapOf,
    field,
)
from .registry import COMPONENTS_SCHEMAS, SchemaRegistry, sanitize_name, schema_ref

__all__ = [
    "BuildOptions",
    "BuiltSchema",
    "PropContext",
    "SchemaBuildError",
    "SchemaBuilder",
    "is_trivial",
    "shape",
    "shape_name",
    "ShapeInfo",
    "describe",
    "COLLECTION_FORMATS",
    "FieldDescriptor",
    "File",
    "FileHeader",
    "ListOf",
    "MapOf",
    "field",
    "COMPONENTS_SCHEMAS",
    "SchemaRegistry",
    "sanitize_name",
    "schema_ref",
]
