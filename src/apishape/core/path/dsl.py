from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Type, Union

from .registry import get_current_path_registry


# -------- Request / Response declarations --------
@dataclass(frozen=True)
class RequestBodySpec:
    structure: Any
    content_type: str = ""
    desc: str = ""
    format: str = ""
    mapping: Optional[Dict[str, Dict[str, str]]] = None


def request_body(
    structure: Any,
    *,
    content_type: str = "",
    desc: str = "",
    format: str = "",
    mapping: Optional[Dict[str, Dict[str, str]]] = None,
) -> RequestBodySpec:
    """
    Full-name helper for request shapes; alias body kept for brevity.

    The shape provides both parameters (query/path/header/cookie fields) and
    the body. An empty content_type tries JSON and form encoding.
    """
    return RequestBodySpec(
        structure=structure,
        content_type=content_type,
        desc=desc,
        format=format,
        mapping=mapping,
    )


body = request_body


@dataclass(frozen=True)
class RespSpec:
    status: int = 0
    structure: Any = None
    content_type: str = ""
    desc: str = ""
    default: bool = False
    format: str = ""
    mapping: Optional[Dict[str, Dict[str, str]]] = None


def response_spec(
    status: int = 0,
    structure: Any = None,
    *,
    content_type: str = "",
    desc: str = "",
    default: bool = False,
    format: str = "",
    mapping: Optional[Dict[str, Dict[str, str]]] = None,
) -> RespSpec:
    """Full-name helper for responses; alias resp kept for brevity. Status 0 means 200."""
    return RespSpec(
        status=status,
        structure=structure,
        content_type=content_type,
        desc=desc,
        default=default,
        format=format,
        mapping=mapping,
    )


resp = response_spec


def default_response(structure: Any = None, **kwargs) -> RespSpec:
    return response_spec(0, structure, default=True, **kwargs)


# -------- Class decorator for path --------
def path(
    url: str,
    *,
    tags: List[str] | None = None,
    summary: str | None = None,
    description: str | None = None,
):
    def _wrap(cls: Type) -> Type:
        setattr(cls, "__path_url__", url)
        setattr(cls, "__path_tags__", tags or [])
        get_current_path_registry().register(
            url, cls, summary=summary, description=description
        )
        return cls

    return _wrap


# -------- Method decorators (store metadata on functions) --------
def _op(
    method: str,
    *,
    summary: str | None = None,
    op_id: str | None = None,
    description: str | None = None,
    tags: List[str] | None = None,
    deprecated: bool = False,
    security: Optional[List[Dict[str, List[str]]]] = None,
    request: Union[RequestBodySpec, Sequence[RequestBodySpec], None] = None,
    responses: Sequence[RespSpec] = (),
):
    if isinstance(request, RequestBodySpec):
        requests = [request]
    else:
        requests = list(request or [])

    def _wrap(func: Callable) -> Callable:
        setattr(func, "__http_method__", method)
        setattr(func, "__op_summary__", summary)
        setattr(func, "__op_id__", op_id)
        setattr(func, "__op_description__", description)
        setattr(func, "__op_tags__", tags or [])
        setattr(func, "__op_deprecated__", deprecated)
        setattr(func, "__op_security__", security or [])
        setattr(func, "__op_requests__", requests)
        setattr(func, "__op_responses__", list(responses))
        return func

    return _wrap


def get(**kwargs):
    return _op("get", **kwargs)


def put(**kwargs):
    return _op("put", **kwargs)


def post(**kwargs):
    return _op("post", **kwargs)


def patch(**kwargs):
    return _op("patch", **kwargs)


def delete(**kwargs):
    return _op("delete", **kwargs)


def head(**kwargs):
    return _op("head", **kwargs)


def options(**kwargs):
    return _op("options", **kwargs)


def trace(**kwargs):
    return _op("trace", **kwargs)
