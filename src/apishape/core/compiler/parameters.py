from __future__ import annotations
import logging
from typing import List

from ..errors import CompileError, DuplicateParameterError
from ..path.context import ContentUnit
from ..path.model import X_FORBID_UNKNOWN, MediaType, Operation, Parameter
from ..schema.builder import PropContext
from ..schema.descriptor import describe
from ..schema.fields import COLLECTION_FORMATS, FieldDescriptor
from .adapter import SchemaAdapter

logger = logging.getLogger(__name__)

PARAMETER_LOCATIONS = ("query", "path", "cookie", "header")

# Secondary tag families read when the location tag is absent.
FALLBACK_TAGS = {"query": ("form",)}


def definitions_prefix(tag: str) -> str:
    """`query` -> `Query`, `formData` -> `FormData`."""
    return tag[:1].upper() + tag[1:]


def apply_field_meta(p: Parameter, f: FieldDescriptor) -> None:
    """Copy declarative field annotations onto a parameter."""
    m = f.meta
    if m["required"]:
        p.required = True
    if m["deprecated"]:
        p.deprecated = True
    if m["allow_empty_value"]:
        p.allow_empty_value = True
    if m["example"] is not None:
        p.example = m["example"]
    if m["style"] is not None:
        p.style = m["style"]
    if m["explode"] is not None:
        p.explode = m["explode"]


class ParameterExtractor:
    def __init__(self, adapter: SchemaAdapter) -> None:
        self.adapter = adapter

    def extract(self, op: Operation, cu: ContentUnit) -> None:
        """
        Run every location; failures are reported together as the first
        error with all messages joined.
        """
        errs: List[CompileError] = []
        for location in PARAMETER_LOCATIONS:
            try:
                self.extract_in(op, cu, location)
            except CompileError as err:
                errs.append(err)
        if errs:
            first = errs[0]
            if len(errs) > 1:
                first.args = (", ".join(str(e) for e in errs),)
            raise first

    def extract_in(self, op: Operation, cu: ContentUnit, location: str) -> None:
        info = describe(cu.structure)
        # lists and maps can only be bodies
        if not info.is_object:
            return

        prefix = definitions_prefix(location)

        def _on_prop(ctx: PropContext) -> None:
            # only top-level fields, embedded ones included
            if ctx.depth > 1:
                return
            p = self.build_parameter(ctx, location, prefix)
            if op.find_parameter(p.name, p.in_) is not None:
                raise DuplicateParameterError(p.name, p.in_)
            op.parameters.append(p)

        built = self.adapter.reflect(
            cu.structure,
            prefix=prefix,
            tag=location,
            additional_tags=FALLBACK_TAGS.get(location, ()),
            mapping=cu.field_mapping_for(location),
            skip_embedded_collections=True,
            intercept_prop=_on_prop,
        )

        if built.forbids_additional:
            op.extensions[X_FORBID_UNKNOWN + location] = True

    def build_parameter(self, ctx: PropContext, location: str, prefix: str) -> Parameter:
        f = ctx.field
        p = Parameter(
            name=ctx.name,
            in_=location,
            description=ctx.schema.get("description", ""),
            schema=ctx.schema,
        )

        if f.meta["collection_format"]:
            style, explode = COLLECTION_FORMATS[f.meta["collection_format"]]
            p.with_style(style, explode)

        inner = describe(f.type_)
        if (
            inner.is_object
            and inner.has_tagged_fields("json")
            and not inner.has_tagged_fields(location)
        ):
            # JSON-encoded object in a single parameter
            built = self.adapter.reflect(f.type_, prefix=prefix, root_ref=True)
            p.schema = None
            p.content = {"application/json": MediaType(schema=built.schema)}
        else:
            plain = self.adapter.reflect(f.type_, inline_refs=True, collect=False)
            if plain.has_type("object"):
                p.with_style("deepObject", True)

        apply_field_meta(p, f)

        if location == "path":
            p.required = True

        logger.debug("parameter %s in %s", p.name, location)
        return p

