from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple, Type

from .context import OperationContext, sanitize_method_path
from .model import Document
from .registry import PathRegistry, get_current_path_registry

if TYPE_CHECKING:
    from ..compiler.compiler import Compiler

logger = logging.getLogger(__name__)


# ---------- collect decorated methods from a class ----------


def _collect_methods(cls: Type) -> List[Tuple[str, Callable]]:
    """
    Scan a @path-decorated class (base classes first, declaration order) and
    collect functions decorated by @get/@post/... .
    """
    seen = {}
    for klass in reversed(cls.__mro__):
        for attr_name, fn in vars(klass).items():
            method = getattr(fn, "__http_method__", None)
            if method:
                seen[attr_name] = (method, fn)
    return list(seen.values())


def build_context(
    compiler: "Compiler", url: str, cls: Type, method: str, fn: Callable
) -> OperationContext:
    """Turn one decorated method into an operation context."""
    oc = compiler.new_operation_context(method, url)

    tags = list(getattr(cls, "__path_tags__", []) or [])
    tags.extend(t for t in getattr(fn, "__op_tags__", []) if t not in tags)
    if tags:
        oc.set_tags(*tags)
    if getattr(fn, "__op_summary__", None):
        oc.set_summary(fn.__op_summary__)
    if getattr(fn, "__op_description__", None):
        oc.set_description(fn.__op_description__)
    if getattr(fn, "__op_id__", None):
        oc.set_id(fn.__op_id__)
    if getattr(fn, "__op_deprecated__", False):
        oc.set_deprecated(True)
    for requirement in getattr(fn, "__op_security__", []):
        for name, scopes in requirement.items():
            oc.add_security(name, *scopes)

    for rb in getattr(fn, "__op_requests__", []):
        oc.add_request(
            rb.structure,
            content_type=rb.content_type,
            description=rb.desc,
            format=rb.format,
            field_mapping=rb.mapping,
        )

    for rs in getattr(fn, "__op_responses__", []):
        oc.add_response(
            rs.structure,
            http_status=rs.status,
            is_default=rs.default,
            content_type=rs.content_type,
            description=rs.desc,
            format=rs.format,
            field_mapping=rs.mapping,
        )
    return oc


# ---------- public: compile the registry into a document ----------


def compile_paths(
    compiler: Optional["Compiler"] = None,
    *,
    registry: Optional[PathRegistry] = None,
) -> Document:
    """
    Compile every decorated method of the current (or given) PathRegistry
    into the compiler's document and return the document.
    """
    if compiler is None:
        from ..compiler.compiler import Compiler

        compiler = Compiler()

    reg = registry if registry is not None else get_current_path_registry()
    for record in reg:
        for cls in record.classes:
            for method, fn in _collect_methods(cls):
                oc = build_context(compiler, record.url, cls, method, fn)
                compiler.add_operation(oc)

        _, clean_url, _ = sanitize_method_path("get", record.url)
        item = compiler.document.paths.get(clean_url)
        if item is not None:
            item.summary = record.summary
            item.description = record.description
        logger.debug("compiled path %s", record.url)
    return compiler.document
