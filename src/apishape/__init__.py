from apishape.core.compiler import Compiler
from apishape.core.errors import (
    CompileError,
    ContextMismatchError,
    DuplicateOperationError,
    DuplicateParameterError,
    MalformedRequestError,
    SchemaAdapterError,
)
from apishape.core.path import Document, OperationContext
from apishape.core.schema import File, FileHeader, ListOf, MapOf, field, shape

__all__ = [
    "Compiler",
    "CompileError",
    "ContextMismatchError",
    "DuplicateOperationError",
    "DuplicateParameterError",
    "MalformedRequestError",
    "SchemaAdapterError",
    "Document",
    "OperationContext",
    "File",
    "FileHeader",
    "ListOf",
    "MapOf",
    "field",
    "shape",
]
