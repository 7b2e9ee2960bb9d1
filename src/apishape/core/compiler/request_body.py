from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from ..path.context import ContentUnit
from ..path.model import MediaType, Operation
from ..schema.descriptor import describe
from .adapter import SchemaAdapter
from .parameters import definitions_prefix

logger = logging.getLogger(__name__)

MIME_JSON = "application/json"
MIME_FORM_URLENCODED = "application/x-www-form-urlencoded"
MIME_MULTIPART = "multipart/form-data"

STRUCTURED_CONTENT_TYPES = ("", MIME_JSON, MIME_FORM_URLENCODED, MIME_MULTIPART)

TAG_JSON = "json"
TAG_FORM_DATA = "formData"
TAG_FORM = "form"

# Methods that carry no request body unless the shape forces one.
BODYLESS_METHODS = ("GET", "HEAD", "DELETE", "TRACE")


def string_schema(format: str = "") -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "string"}
    if format:
        schema["format"] = format
    return schema


class RequestBodyNegotiator:
    """
    Decides whether a content unit yields a request body and with which
    media type: JSON, form-urlencoded, multipart or a plain string type.
    """

    def __init__(self, adapter: SchemaAdapter) -> None:
        self.adapter = adapter

    def negotiate(self, op: Operation, method: str, cu: ContentUnit) -> None:
        form_mapping = cu.field_mapping_for(TAG_FORM_DATA)
        if cu.content_type == "":
            self.parse(op, method, cu, MIME_JSON, None, TAG_JSON)
            self.parse(
                op, method, cu, MIME_FORM_URLENCODED, form_mapping, TAG_FORM_DATA, TAG_FORM
            )
        elif cu.content_type == MIME_JSON:
            self.parse(op, method, cu, MIME_JSON, None, TAG_JSON)
        elif cu.content_type in (MIME_FORM_URLENCODED, MIME_MULTIPART):
            # multipart only comes from file fields, see parse
            self.parse(
                op, method, cu, MIME_FORM_URLENCODED, form_mapping, TAG_FORM_DATA, TAG_FORM
            )
        else:
            op.request_body_ens().content[cu.content_type] = MediaType(
                schema=string_schema(cu.format)
            )

        if cu.description and op.requestBody is not None:
            op.requestBody.description = cu.description

    def parse(
        self,
        op: Operation,
        method: str,
        cu: ContentUnit,
        mime: str,
        mapping: Optional[Dict[str, str]],
        tag: str,
        *additional_tags: str,
    ) -> bool:
        """Add a media type for `mime` if the shape qualifies; return whether it did."""
        info = describe(cu.structure)
        if info.kind == "none":
            return False

        if method.upper() in BODYLESS_METHODS and not info.force_request_body:
            logger.debug("no %s body for %s: method has no body", mime, method.upper())
            return False

        has_tagged = any(info.has_tagged_fields(t) for t in (tag,) + additional_tags)

        # form bodies need form fields, a list or map can not be form encoded
        if not has_tagged and not mapping and tag != TAG_JSON:
            return False

        # form-data fields take the body over unless JSON is forced
        if (
            tag == TAG_JSON
            and info.has_tagged_fields(TAG_FORM_DATA)
            and not info.force_json_body
        ):
            return False

        # untagged JSON only as a list or map
        if (
            not has_tagged
            and not mapping
            and not info.is_collection
            and info.find_embedded_collection() is None
        ):
            return False

        has_file_upload = False

        def _intercept(target: Any, schema: Dict[str, Any]) -> bool:
            nonlocal has_file_upload
            if not describe(target).is_file_handle:
                return False
            schema.update(string_schema("binary"))
            has_file_upload = True
            return True

        prefix = "" if tag == TAG_JSON else definitions_prefix(tag)
        built = self.adapter.reflect(
            cu.structure,
            prefix=prefix,
            tag=tag,
            additional_tags=additional_tags,
            mapping=mapping,
            root_ref=True,
            intercept_schema=_intercept,
        )

        # binary fields are not valid in url-encoded bodies
        if mime == MIME_FORM_URLENCODED and has_file_upload:
            mime = MIME_MULTIPART

        op.request_body_ens().content[mime] = MediaType(schema=built.schema)
        logger.debug("request body %s", mime)
        return True
