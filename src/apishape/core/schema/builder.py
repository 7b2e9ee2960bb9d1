from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from .descriptor import ShapeInfo, describe
from .fields import FieldDescriptor

# Keywords that annotate a schema without constraining it.
NON_CONSTRAINING = ("title", "description", "$comment", "$id", "examples", "example")


class SchemaBuildError(Exception):
    """Raised when a descriptor cannot be translated into a schema."""


@dataclass
class PropContext:
    """A processed property, handed to BuildOptions.intercept_prop."""

    name: str
    field: FieldDescriptor
    schema: Dict[str, Any]
    depth: int
    owner: ShapeInfo


@dataclass
class BuildOptions:
    """
    Knobs for one SchemaBuilder.build call.

    - definitions_prefix: prepended to definition names in `$ref` values.
    - collect_definitions: receives (name, schema) for every definition;
      when None, definitions are returned on BuiltSchema.definitions.
    - property_name_tag / additional_tags: tag families read for property
      names, first match wins.
    - property_name_mapping: attribute name -> property name, overrides tags.
    - root_ref: emit the root object as a definition and return its `$ref`.
    - inline_refs: inline nested shapes instead of referencing them.
    - skip_embedded_collections: ignore embedded ListOf/MapOf fields.
    - intercept_prop: called after each property schema is built.
    - intercept_schema: called with (target, schema) before a type is
      translated; returning True keeps the mutated schema as is.
    - def_name: maps a shape name to its definition name.
    - process_without_tags: include untagged fields under their attribute name.
    """

    definitions_prefix: str = "#/definitions/"
    collect_definitions: Optional[Callable[[str, Dict[str, Any]], None]] = None
    property_name_tag: str = "json"
    additional_tags: Tuple[str, ...] = ()
    property_name_mapping: Dict[str, str] = field(default_factory=dict)
    root_ref: bool = False
    inline_refs: bool = False
    skip_embedded_collections: bool = False
    intercept_prop: Optional[Callable[[PropContext], None]] = None
    intercept_schema: Optional[Callable[[Any, Dict[str, Any]], bool]] = None
    def_name: Optional[Callable[[str], str]] = None
    process_without_tags: bool = False

    @property
    def tags(self) -> Tuple[str, ...]:
        return (self.property_name_tag,) + tuple(self.additional_tags)


@dataclass
class BuiltSchema:
    schema: Dict[str, Any]
    definitions: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    description: Optional[str] = None

    def has_type(self, type_name: str) -> bool:
        t = self.schema.get("type")
        if isinstance(t, list):
            return type_name in t
        return t == type_name

    @property
    def forbids_additional(self) -> bool:
        return self.schema.get("additionalProperties") is False


class _Run:
    """State of a single build: options, collected definitions, recursion guard."""

    def __init__(self, options: BuildOptions) -> None:
        self.options = options
        self.definitions: Dict[str, Dict[str, Any]] = {}
        self.building: Set[str] = set()
        self.inlining: Set[type] = set()

    # ---- naming ----
    def def_name(self, info: ShapeInfo) -> str:
        if self.options.def_name is not None:
            return self.options.def_name(info.name)
        return info.name

    def property_name(self, f: FieldDescriptor) -> Optional[str]:
        mapping = self.options.property_name_mapping
        if f.name in mapping:
            return mapping[f.name]
        for tag in self.options.tags:
            if tag in f.tags:
                value = f.tags[tag]
                return None if value == "-" else value
        if self.options.process_without_tags:
            return f.name
        return None

    # ---- translation ----
    def type_schema(self, target: Any, depth: int) -> Dict[str, Any]:
        if self.options.intercept_schema is not None:
            schema: Dict[str, Any] = {}
            if self.options.intercept_schema(target, schema):
                return schema

        info = describe(target)
        if info.kind == "none":
            return {}
        if info.kind == "primitive":
            t = info.target
            return {"type": list(t) if isinstance(t, (list, tuple)) else t}
        if info.kind == "list":
            return {"type": "array", "items": self.type_schema(target.item, depth)}
        if info.kind == "map":
            return {
                "type": "object",
                "additionalProperties": self.type_schema(target.value, depth),
            }
        if info.kind == "file":
            return {}
        if info.kind == "object":
            return self.object_ref(info, depth)
        raise SchemaBuildError(f"unsupported descriptor {target!r}")

    def object_ref(self, info: ShapeInfo, depth: int) -> Dict[str, Any]:
        if self.options.inline_refs:
            if info.target in self.inlining:
                # recursive shape: stop at a bare object
                return {"type": "object"}
            self.inlining.add(info.target)
            try:
                return self.object_schema(info, depth)
            finally:
                self.inlining.discard(info.target)

        name = self.def_name(info)
        if not name:
            raise SchemaBuildError(f"empty definition name for {info.target!r}")
        if name not in self.definitions and name not in self.building:
            self.building.add(name)
            try:
                self.definitions[name] = self.object_schema(info, depth)
            finally:
                self.building.discard(name)
        return {"$ref": self.options.definitions_prefix + name}

    def field_schema(self, f: FieldDescriptor, depth: int) -> Dict[str, Any]:
        schema = dict(self.type_schema(f.type_, depth + 1))
        m = f.meta
        if m["description"]:
            schema["description"] = m["description"]
        if "$ref" not in schema:
            if m["format"]:
                schema["format"] = m["format"]
            if m["enum"] is not None:
                schema["enum"] = list(m["enum"])
            if m["default"] is not None:
                schema["default"] = m["default"]
        if m["example"] is not None:
            schema["examples"] = [m["example"]]
        if m["deprecated"]:
            schema["deprecated"] = True
        schema.update(m["extra"])
        return schema

    def collect_props(
        self,
        info: ShapeInfo,
        fields: List[FieldDescriptor],
        depth: int,
        props: Dict[str, Any],
        required: List[str],
    ) -> Optional[FieldDescriptor]:
        """Fill props/required; return an embedded collection field if one is found."""
        collection: Optional[FieldDescriptor] = None
        for f in fields:
            if f.embedded:
                inner = describe(f.type_)
                if inner.is_object:
                    found = self.collect_props(info, inner.fields, depth, props, required)
                    collection = collection or found
                elif inner.is_collection and not self.options.skip_embedded_collections:
                    collection = collection or f
                continue

            name = self.property_name(f)
            if name is None:
                continue
            prop_schema = self.field_schema(f, depth)
            props[name] = prop_schema
            if f.meta["required"] and name not in required:
                required.append(name)
            if self.options.intercept_prop is not None:
                self.options.intercept_prop(
                    PropContext(
                        name=name,
                        field=f,
                        schema=prop_schema,
                        depth=depth,
                        owner=info,
                    )
                )
        return collection

    def object_schema(self, info: ShapeInfo, depth: int) -> Dict[str, Any]:
        props: Dict[str, Any] = {}
        required: List[str] = []
        collection = self.collect_props(info, info.fields, depth, props, required)

        # a shape whose only body is an embedded list/map is that collection
        if collection is not None and not props:
            return self.type_schema(collection.type_, depth)

        schema: Dict[str, Any] = {"type": "object"}
        if info.title:
            schema["title"] = info.title
        if info.description:
            schema["description"] = info.description
        if props:
            schema["properties"] = props
        if required:
            schema["required"] = required
        if info.forbid_unknown:
            schema["additionalProperties"] = False
        return schema


class SchemaBuilder:
    """
    Translates structural descriptors into JSON Schema dicts.

    The builder is stateless; every call gets its own definitions map, so
    repeated builds of the same descriptor with the same options are
    deterministic.
    """

    def build(self, target: Any, options: Optional[BuildOptions] = None) -> BuiltSchema:
        opts = options or BuildOptions()
        run = _Run(opts)
        info = describe(target)

        if info.is_object and not opts.root_ref:
            schema = run.object_schema(info, 1)
        elif info.is_object:
            schema = run.object_ref(info, 1)
        else:
            schema = run.type_schema(target, 1)

        definitions = run.definitions
        if opts.collect_definitions is not None:
            for name, definition in definitions.items():
                opts.collect_definitions(name, definition)
            definitions = {}

        return BuiltSchema(
            schema=schema,
            definitions=definitions,
            description=info.description or None,
        )


def strip_non_constraining(schema: Dict[str, Any]) -> Dict[str, Any]:
    return {
        k: v
        for k, v in schema.items()
        if k not in NON_CONSTRAINING and not k.startswith("x-")
    }


def is_trivial(
    schema: Any,
    resolve_ref: Optional[Callable[[str], Optional[Dict[str, Any]]]] = None,
    _seen: Optional[Set[str]] = None,
) -> bool:
    """
    True when a schema carries no field information: `{}`, `true`, or a bare
    `{"type": "object"}` once annotations are stripped. References are
    followed through `resolve_ref`; a reference cycle is not trivial.
    """
    if schema is True:
        return True
    if not isinstance(schema, dict):
        return False
    stripped = strip_non_constraining(schema)
    ref = stripped.pop("$ref", None)
    if ref is None:
        return stripped in ({}, {"type": "object"})
    if stripped or resolve_ref is None:
        return False
    seen = set(_seen or ())
    if ref in seen:
        return False
    seen.add(ref)
    target = resolve_ref(ref)
    if target is None:
        return False
    return is_trivial(target, resolve_ref, seen)
