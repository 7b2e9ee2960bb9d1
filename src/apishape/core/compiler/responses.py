from __future__ import annotations
import http
from typing import Dict

from ..path.context import ContentUnit
from ..path.model import Header, MediaType, Operation, Response
from ..schema.builder import PropContext
from ..schema.descriptor import describe
from .adapter import SchemaAdapter
from .request_body import MIME_JSON, string_schema

DEFAULT_BUCKET = "default"


def bucket_key(status: int, is_default: bool = False) -> str:
    """`default`, `NXX` for statuses 1-5, else the exact status code."""
    if is_default:
        return DEFAULT_BUCKET
    if 0 < status < 6:
        return f"{status}XX"
    return str(status)


def status_text(status: int) -> str:
    try:
        return http.HTTPStatus(status).phrase
    except ValueError:
        return ""


class ResponseAssembler:
    def __init__(self, adapter: SchemaAdapter) -> None:
        self.adapter = adapter

    def assemble(self, op: Operation, method: str, cu: ContentUnit) -> Response:
        status = cu.http_status
        if status == 0 and not cu.is_default:
            status = http.HTTPStatus.OK.value

        content_type = cu.content_type.split(";")[0].strip()
        key = bucket_key(status, cu.is_default)

        resp = op.default if cu.is_default else op.responses.get(key)
        if resp is None:
            resp = Response()

        if method.upper() != "HEAD":
            self.parse_json_body(resp, cu, content_type)
            self.parse_headers(resp, cu)
            if content_type:
                ensure_content_type(resp, content_type, cu.format)
        else:
            # only headers with HEAD
            self.parse_headers(resp, cu)

        if cu.description:
            resp.description = cu.description
        if not resp.description:
            resp.description = status_text(status)

        if cu.is_default:
            op.default = resp
        else:
            op.responses[key] = resp
        return resp

    def parse_json_body(self, resp: Response, cu: ContentUnit, content_type: str) -> None:
        if cu.structure is None:
            return
        if not self.adapter.has_json_body(cu.structure):
            return

        built = self.adapter.reflect(cu.structure, root_ref=True)
        resp.content[content_type or MIME_JSON] = MediaType(schema=built.schema)

        if built.description and not resp.description:
            resp.description = built.description

    def parse_headers(self, resp: Response, cu: ContentUnit) -> None:
        if not describe(cu.structure).is_object:
            return

        headers: Dict[str, Header] = {}

        def _on_prop(ctx: PropContext) -> None:
            # top-level fields only, embedded ones included
            if ctx.depth > 1:
                return
            m = ctx.field.meta
            headers[ctx.name] = Header(
                schema=ctx.schema,
                description=ctx.schema.get("description", ""),
                required=bool(m["required"]),
                deprecated=bool(ctx.schema.get("deprecated", False)),
                example=m["example"],
            )

        built = self.adapter.reflect(
            cu.structure,
            tag="header",
            mapping=cu.field_mapping_for("header"),
            inline_refs=True,
            collect=False,
            intercept_prop=_on_prop,
        )

        resp.headers.update(headers)

        if built.description and not resp.description:
            resp.description = built.description


def ensure_content_type(resp: Response, content_type: str, format: str = "") -> None:
    if content_type not in resp.content:
        resp.content[content_type] = MediaType(schema=string_schema(format))
