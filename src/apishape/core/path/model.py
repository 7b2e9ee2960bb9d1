from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Literal, Optional

from ..errors import DuplicateOperationError, MalformedRequestError
from ..schema.registry import SchemaRegistry

HTTPMethod = Literal[
    "get", "put", "post", "delete", "options", "head", "patch", "trace"
]
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
ParameterIn = Literal["path", "query", "header", "cookie"]

# Vendor extension prefix, suffixed with the parameter location.
X_FORBID_UNKNOWN = "x-forbid-unknown-"

OPENAPI_VERSION = "3.1.0"


@dataclass
class MediaType:
    schema: Optional[Dict[str, Any]] = None
    example: Optional[Any] = None
    examples: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.schema is not None:
            out["schema"] = self.schema
        if self.example is not None:
            out["example"] = self.example
        if self.examples is not None:
            out["examples"] = self.examples
        return out


@dataclass
class RequestBody:
    description: str = ""
    required: bool = False
    content: Dict[str, MediaType] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.description:
            out["description"] = self.description
        if self.required:
            out["required"] = True
        out["content"] = {k: v.to_dict() for k, v in self.content.items()}
        return out


@dataclass
class Header:
    schema: Optional[Dict[str, Any]] = None
    description: str = ""
    required: bool = False
    deprecated: bool = False
    example: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.description:
            out["description"] = self.description
        if self.required:
            out["required"] = True
        if self.deprecated:
            out["deprecated"] = True
        if self.schema is not None:
            out["schema"] = self.schema
        if self.example is not None:
            out["example"] = self.example
        return out


@dataclass
class Response:
    description: str = ""
    headers: Dict[str, Header] = field(default_factory=dict)
    content: Dict[str, MediaType] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"description": self.description}
        if self.headers:
            out["headers"] = {k: v.to_dict() for k, v in self.headers.items()}
        if self.content:
            out["content"] = {k: v.to_dict() for k, v in self.content.items()}
        return out


@dataclass
class Parameter:
    name: str
    in_: ParameterIn
    description: str = ""
    required: bool = False
    deprecated: bool = False
    allow_empty_value: bool = False
    style: Optional[str] = None
    explode: Optional[bool] = None
    schema: Optional[Dict[str, Any]] = None
    content: Optional[Dict[str, MediaType]] = None
    example: Optional[Any] = None

    def with_style(self, style: str, explode: bool) -> "Parameter":
        self.style = style
        self.explode = explode
        return self

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name, "in": self.in_}
        if self.description:
            d["description"] = self.description
        if self.required:
            d["required"] = True
        if self.deprecated:
            d["deprecated"] = True
        if self.allow_empty_value:
            d["allowEmptyValue"] = True
        if self.style is not None:
            d["style"] = self.style
        if self.explode is not None:
            d["explode"] = self.explode
        if self.schema is not None:
            d["schema"] = self.schema
        if self.content is not None:
            d["content"] = {k: v.to_dict() for k, v in self.content.items()}
        if self.example is not None:
            d["example"] = self.example
        return d


@dataclass
class Operation:
    summary: Optional[str] = None
    operationId: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    deprecated: bool = False
    security: List[Dict[str, List[str]]] = field(default_factory=list)
    parameters: List[Parameter] = field(default_factory=list)
    requestBody: Optional[RequestBody] = None
    responses: Dict[str, Response] = field(default_factory=dict)
    default: Optional[Response] = None
    extensions: Dict[str, Any] = field(default_factory=dict)

    def request_body_ens(self) -> RequestBody:
        if self.requestBody is None:
            self.requestBody = RequestBody()
        return self.requestBody

    def find_parameter(self, name: str, in_: str) -> Optional[Parameter]:
        for p in self.parameters:
            if p.name == name and p.in_ == in_:
                return p
        return None

    def unknown_param_is_forbidden(self, in_: str) -> bool:
        return bool(self.extensions.get(X_FORBID_UNKNOWN + in_))

    def validate_path_params(self, path_params: Iterable[str]) -> None:
        """
        Every path parameter needs a placeholder in the pattern and every
        placeholder needs a path parameter.
        """
        placeholders = set(path_params)
        declared = set()
        errs: List[str] = []
        for p in self.parameters:
            if p.in_ != "path":
                continue
            if p.name not in placeholders:
                errs.append(f"missing path parameter placeholder in url: {p.name}")
            declared.add(p.name)
        for name in sorted(placeholders - declared):
            errs.append(f"undefined path parameter: {name}")
        if errs:
            raise MalformedRequestError(", ".join(errs))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.tags:
            out["tags"] = list(self.tags)
        if self.summary:
            out["summary"] = self.summary
        if self.description:
            out["description"] = self.description
        if self.operationId:
            out["operationId"] = self.operationId
        if self.parameters:
            out["parameters"] = [p.to_dict() for p in self.parameters]
        if self.requestBody is not None and self.requestBody.content:
            out["requestBody"] = self.requestBody.to_dict()
        responses = {k: v.to_dict() for k, v in self.responses.items()}
        if self.default is not None:
            responses["default"] = self.default.to_dict()
        out["responses"] = responses
        if self.deprecated:
            out["deprecated"] = True
        if self.security:
            out["security"] = [dict(s) for s in self.security]
        out.update(self.extensions)
        return out


@dataclass
class PathItem:
    summary: Optional[str] = None
    description: Optional[str] = None
    methods: Dict[str, Operation] = field(default_factory=dict)

    def operation(self, method: str) -> Optional[Operation]:
        return self.methods.get(method.lower())

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.summary:
            d["summary"] = self.summary
        if self.description:
            d["description"] = self.description
        for m, op in self.methods.items():
            d[m] = op.to_dict()
        return d


@dataclass
class Document:
    """
    In-memory OpenAPI document: paths plus the component schema registry.

    Holds exactly one Operation per (method, path pattern). Not safe for
    concurrent mutation; compile into one Document from a single writer.
    """

    info: Dict[str, Any] = field(
        default_factory=lambda: {"title": "API", "version": "1.0.0"}
    )
    openapi: str = OPENAPI_VERSION
    paths: Dict[str, PathItem] = field(default_factory=dict)
    components: SchemaRegistry = field(default_factory=SchemaRegistry)

    def operation(self, method: str, path_pattern: str) -> Optional[Operation]:
        item = self.paths.get(path_pattern)
        if item is None:
            return None
        return item.operation(method)

    def add_operation(self, method: str, path_pattern: str, op: Operation) -> None:
        method = method.lower()
        if method not in HTTP_METHODS:
            raise MalformedRequestError(f"unexpected http method: {method}")
        if self.operation(method, path_pattern) is not None:
            raise DuplicateOperationError(method, path_pattern)
        item = self.paths.setdefault(path_pattern, PathItem())
        item.methods[method] = op

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "openapi": self.openapi,
            "info": dict(self.info),
            "paths": {url: item.to_dict() for url, item in self.paths.items()},
        }
        if self.components.get_components():
            out["components"] = {"schemas": dict(self.components.get_components())}
        return out
