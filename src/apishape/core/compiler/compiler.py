from __future__ import annotations
import copy
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from ..errors import CompileError, ContextMismatchError, DuplicateOperationError
from ..path.context import OperationContext, sanitize_method_path
from ..path.model import OPENAPI_VERSION, Document, Operation
from ..schema.builder import SchemaBuilder
from .adapter import SchemaAdapter
from .parameters import ParameterExtractor
from .request_body import STRUCTURED_CONTENT_TYPES, RequestBodyNegotiator
from .responses import ResponseAssembler

logger = logging.getLogger(__name__)


@contextmanager
def _step(name: str, oc: OperationContext) -> Iterator[None]:
    """Prefix compile errors raised inside the block with the step and endpoint."""
    try:
        yield
    except CompileError as err:
        err.args = (f"{name} {oc.method.upper()} {oc.path_pattern}: {err}",)
        raise


class Compiler:
    """
    Compiles operation contexts into one OpenAPI document.

    Typical use:
        compiler = Compiler(info={"title": "Pets", "version": "1.0.0"})
        oc = compiler.new_operation_context("POST", "/pets/{id}")
        oc.add_request(CreatePet)
        oc.add_response(Pet, http_status=201)
        compiler.add_operation(oc)
        compiler.document.to_dict()

    The document and its schema registry are owned by the compiler and must
    be mutated from a single thread.
    """

    def __init__(
        self,
        document: Optional[Document] = None,
        *,
        openapi: str = OPENAPI_VERSION,
        info: Optional[Dict[str, Any]] = None,
        builder: Optional[SchemaBuilder] = None,
    ) -> None:
        if document is None:
            document = Document(openapi=openapi)
            if info is not None:
                document.info = dict(info)
        self.document = document
        self.registry = document.components
        self.adapter = SchemaAdapter(self.registry, builder)
        self.parameters = ParameterExtractor(self.adapter)
        self.request_bodies = RequestBodyNegotiator(self.adapter)
        self.responses = ResponseAssembler(self.adapter)

    def new_operation_context(self, method: str, path_pattern: str) -> OperationContext:
        method, path_pattern, path_params = sanitize_method_path(method, path_pattern)
        if self.document.operation(method, path_pattern) is not None:
            raise DuplicateOperationError(method, path_pattern)
        return OperationContext(method, path_pattern, path_params)

    def add_operation(self, oc: Any) -> Operation:
        """
        Build parameters, request body and responses for `oc` and insert the
        operation into the document. Nothing is inserted when a step fails,
        although schemas registered by earlier steps stay in the registry.
        """
        if not isinstance(oc, OperationContext):
            raise ContextMismatchError(
                f"wrong operation context {type(oc).__name__} received, "
                f"{OperationContext.__name__} expected"
            )

        # the context stays reusable; the document owns the compiled copy
        op = copy.deepcopy(oc.operation)

        with _step("setup request", oc):
            self.setup_request(op, oc)
        with _step("validate path params", oc):
            op.validate_path_params(oc.path_params)
        with _step("setup response", oc):
            self.setup_response(op, oc)
        with _step("add operation", oc):
            self.document.add_operation(oc.method, oc.path_pattern, op)
        oc.compiled = op

        logger.debug("added operation %s %s", oc.method.upper(), oc.path_pattern)
        return op

    def setup_request(self, op: Operation, oc: OperationContext) -> None:
        for cu in oc.request:
            # plain string bodies carry no parameters
            if cu.content_type in STRUCTURED_CONTENT_TYPES:
                self.parameters.extract(op, cu)
            self.request_bodies.negotiate(op, oc.method, cu)

    def setup_response(self, op: Operation, oc: OperationContext) -> None:
        for cu in oc.response:
            self.responses.assemble(op, oc.method, cu)

    def to_dict(self) -> Dict[str, Any]:
        return self.document.to_dict()
