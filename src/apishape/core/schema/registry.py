from __future__ import annotations
import logging
import re
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

COMPONENTS_SCHEMAS = "#/components/schemas/"

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9.\-_]+")


def sanitize_name(name: str) -> str:
    """Strip every character outside [A-Za-z0-9._-]; `Foo[Bar]` -> `FooBar`."""
    return _UNSAFE_NAME_CHARS.sub("", name)


def schema_ref(name: str) -> str:
    return COMPONENTS_SCHEMAS + name


class SchemaRegistry:
    """
    Holds the component schemas of one document (components.schemas).

    Names are unique and never overwritten: the first schema registered under
    a name wins and later registrations of that name are dropped. One registry
    belongs to one document and is not safe for concurrent mutation.
    """

    def __init__(self, components: Optional[Dict[str, Any]] = None) -> None:
        self.components: Dict[str, Any] = components if components is not None else {}

    # ---- components ----
    def register(self, name_prefix: str, local_name: str, schema: Any) -> str:
        """
        Store `schema` under sanitize(name_prefix + local_name) unless that
        name is taken. Returns the final name either way.
        """
        name = sanitize_name(name_prefix + local_name)
        if name in self.components:
            if self.components[name] != schema:
                logger.warning(
                    "schema %r already registered with a different definition; "
                    "keeping the first one",
                    name,
                )
            return name
        self.components[name] = schema
        logger.debug("registered schema %r", name)
        return name

    def resolve_ref(self, ref: str) -> Optional[Any]:
        """Stored schema for a `#/components/schemas/<Name>` reference, if any."""
        if not ref.startswith(COMPONENTS_SCHEMAS):
            return None
        return self.components.get(ref[len(COMPONENTS_SCHEMAS):])

    def get_components(self) -> Dict[str, Any]:
        return self.components

    def __contains__(self, name: str) -> bool:
        return name in self.components

    def __len__(self) -> int:
        return len(self.components)

    def clear(self) -> None:
        self.components.clear()

    def snapshot(self) -> Dict[str, Any]:
        return {"components": {"schemas": dict(self.components)}}
