from .adapter import SchemaAdapter
from .compiler import Compiler
from .parameters import PARAMETER_LOCATIONS, ParameterExtractor
from .request_body import (
    MIME_FORM_URLENCODED,
    MIME_JSON,
    MIME_MULTIPART,
    RequestBodyNegotiator,
)
from .responses import ResponseAssembler, bucket_key, status_text

__all__ = [
    "SchemaAdapter",
    "Compiler",
    "PARAMETER_LOCATIONS",
    "ParameterExtractor",
    "MIME_FORM_URLENCODED",
    "MIME_JSON",
    "MIME_MULTIPART",
    "RequestBodyNegotiator",
    "ResponseAssembler",
    "bucket_key",
    "status_text",
]
