from __future__ import annotations
from typing import Any, Callable, Dict, Optional, Sequence

from ..errors import SchemaAdapterError
from ..schema.builder import (
    BuildOptions,
    BuiltSchema,
    PropContext,
    SchemaBuildError,
    SchemaBuilder,
    is_trivial,
)
from ..schema.registry import COMPONENTS_SCHEMAS, SchemaRegistry, sanitize_name


class SchemaAdapter:
    """
    Runs the schema builder with the document's naming policy: definitions
    are referenced under `#/components/schemas/<prefix>` and registered into
    the SchemaRegistry as `<prefix><Name>`, names sanitized.
    """

    def __init__(
        self, registry: SchemaRegistry, builder: Optional[SchemaBuilder] = None
    ) -> None:
        self.registry = registry
        self.builder = builder or SchemaBuilder()

    def collector(self, prefix: str) -> Callable[[str, Dict[str, Any]], None]:
        def _collect(name: str, schema: Dict[str, Any]) -> None:
            self.registry.register(prefix, name, schema)

        return _collect

    def resolve_ref(self, ref: str) -> Optional[Any]:
        return self.registry.resolve_ref(ref)

    def reflect(
        self,
        target: Any,
        *,
        prefix: str = "",
        tag: str = "json",
        additional_tags: Sequence[str] = (),
        mapping: Optional[Dict[str, str]] = None,
        root_ref: bool = False,
        inline_refs: bool = False,
        collect: bool = True,
        skip_embedded_collections: bool = False,
        intercept_prop: Optional[Callable[[PropContext], None]] = None,
        intercept_schema: Optional[Callable[[Any, Dict[str, Any]], bool]] = None,
    ) -> BuiltSchema:
        options = BuildOptions(
            definitions_prefix=COMPONENTS_SCHEMAS + prefix,
            collect_definitions=self.collector(prefix) if collect else None,
            property_name_tag=tag,
            additional_tags=tuple(additional_tags),
            property_name_mapping=dict(mapping or {}),
            root_ref=root_ref,
            inline_refs=inline_refs,
            skip_embedded_collections=skip_embedded_collections,
            intercept_prop=intercept_prop,
            intercept_schema=intercept_schema,
            def_name=sanitize_name,
        )
        try:
            return self.builder.build(target, options)
        except SchemaBuildError as err:
            raise SchemaAdapterError(str(err)) from err

    def has_json_body(self, target: Any) -> bool:
        """False when the JSON schema of `target` carries no field information."""
        built = self.reflect(target, root_ref=True, collect=False)
        local = built.definitions

        def _resolve(ref: str) -> Optional[Any]:
            if ref.startswith(COMPONENTS_SCHEMAS):
                name = ref[len(COMPONENTS_SCHEMAS):]
                if name in local:
                    return local[name]
            return self.resolve_ref(ref)

        return not is_trivial(built.schema, _resolve)
