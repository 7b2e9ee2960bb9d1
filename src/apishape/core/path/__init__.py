from .context import ContentUnit, OperationContext, sanitize_method_path
from .dsl import (
    RequestBodySpec,
    RespSpec,
    body,
    default_response,
    delete,
    get,
    head,
    options,
    patch,
    path,
    post,
    put,
    request_body,
    resp,
    response_spec,
    trace,
)
from .export import build_context, compile_paths
from .model import (
    Document,
    Header,
    MediaType,
    Operation,
    Parameter,
    PathItem,
    RequestBody,
    Response,
)
from .registry import (
    EndpointRecord,
    PathRegistry,
    get_current_path_registry,
    use_path_registry,
)

__all__ = [
    "ContentUnit",
    "OperationContext",
    "sanitize_method_path",
    "RequestBodySpec",
    "RespSpec",
    "body",
    "default_response",
    "delete",
    "get",
    "head",
    "options",
    "patch",
    "path",
    "post",
    "put",
    "request_body",
    "resp",
    "response_spec",
    "trace",
    "build_context",
    "compile_paths",
    "Document",
    "Header",
    "MediaType",
    "Operation",
    "Parameter",
    "PathItem",
    "RequestBody",
    "Response",
    "EndpointRecord",
    "PathRegistry",
    "get_current_path_registry",
    "use_path_registry",
]
