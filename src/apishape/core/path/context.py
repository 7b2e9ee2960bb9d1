from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..errors import MalformedRequestError
from .model import HTTP_METHODS, Operation

# {name} or gorilla-style {name:regexp}
_PATH_PARAM = re.compile(r"{([^}:]+)(:[^/]+)?(?:})")


def sanitize_method_path(method: str, path_pattern: str) -> Tuple[str, str, List[str]]:
    """
    Lower-case and validate the method, strip placeholder regexps from the
    pattern and return (method, path_pattern, placeholder names).
    """
    method = (method or "").lower()
    if method not in HTTP_METHODS:
        raise MalformedRequestError(f"unexpected http method: {method}")
    if not path_pattern or not path_pattern.startswith("/"):
        raise MalformedRequestError(
            f"path pattern must start with '/': {path_pattern!r}"
        )

    path_params: List[str] = []
    for match in _PATH_PARAM.finditer(path_pattern):
        path_params.append(match.group(1))

    def _strip(match: "re.Match[str]") -> str:
        return "{" + match.group(1) + "}"

    return method, _PATH_PARAM.sub(_strip, path_pattern), path_params


@dataclass
class ContentUnit:
    """
    One request or response variant of an operation.

    - structure: the shape describing parameters/body/headers (may be None).
    - content_type: "" lets the compiler infer JSON and/or form encoding.
    - http_status: 0 means 200 unless `is_default` is set.
    - format: string format used for non-JSON media types.
    - field_mapping: location -> {attribute name: property name}, for shapes
      whose fields are not tagged for that location.
    """

    structure: Any = None
    content_type: str = ""
    http_status: int = 0
    is_default: bool = False
    description: str = ""
    format: str = ""
    field_mapping: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def field_mapping_for(self, location: str) -> Dict[str, str]:
        return self.field_mapping.get(location, {})


class OperationContext:
    """
    Collects request/response content units and metadata for one operation
    before it is compiled into the document with Compiler.add_operation.
    """

    def __init__(self, method: str, path_pattern: str, path_params: List[str]):
        self.method = method
        self.path_pattern = path_pattern
        self.path_params = list(path_params)
        self.operation = Operation()
        self.request: List[ContentUnit] = []
        self.response: List[ContentUnit] = []
        # set by Compiler.add_operation once the operation is in the document
        self.compiled: Optional[Operation] = None

    def add_request(
        self,
        structure: Any,
        *,
        content_type: str = "",
        description: str = "",
        format: str = "",
        field_mapping: Optional[Dict[str, Dict[str, str]]] = None,
    ) -> ContentUnit:
        cu = ContentUnit(
            structure=structure,
            content_type=content_type,
            description=description,
            format=format,
            field_mapping=dict(field_mapping or {}),
        )
        self.request.append(cu)
        return cu

    def add_response(
        self,
        structure: Any = None,
        *,
        http_status: int = 0,
        is_default: bool = False,
        content_type: str = "",
        description: str = "",
        format: str = "",
        field_mapping: Optional[Dict[str, Dict[str, str]]] = None,
    ) -> ContentUnit:
        cu = ContentUnit(
            structure=structure,
            content_type=content_type,
            http_status=http_status,
            is_default=is_default,
            description=description,
            format=format,
            field_mapping=dict(field_mapping or {}),
        )
        self.response.append(cu)
        return cu

    # ---- operation metadata ----
    def set_summary(self, summary: str) -> None:
        self.operation.summary = summary

    def set_description(self, description: str) -> None:
        self.operation.description = description

    def set_id(self, operation_id: str) -> None:
        self.operation.operationId = operation_id

    def set_tags(self, *tags: str) -> None:
        self.operation.tags = list(tags)

    def set_deprecated(self, deprecated: bool = True) -> None:
        self.operation.deprecated = deprecated

    def add_security(self, name: str, *scopes: str) -> None:
        self.operation.security.append({name: list(scopes)})

    def unknown_params_are_forbidden(self, location: str) -> bool:
        op = self.compiled if self.compiled is not None else self.operation
        return op.unknown_param_is_forbidden(location)

    def __repr__(self) -> str:
        return f"OperationContext({self.method.upper()} {self.path_pattern})"
