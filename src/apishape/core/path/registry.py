from __future__ import annotations
import contextvars
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Type


@dataclass
class EndpointRecord:
    """Classes declared for one url by @path, in declaration order."""

    url: str
    classes: List[Type] = field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None


class PathRegistry:
    """
    Collects @path classes per url until compile_paths turns them into
    operations. Urls keep the form they were declared with; placeholder
    regexps are stripped at compile time.
    """

    def __init__(self) -> None:
        self._records: Dict[str, EndpointRecord] = {}
        self._owners: Dict[Type, str] = {}

    def register(
        self,
        url: str,
        cls: Type,
        *,
        summary: Optional[str] = None,
        description: Optional[str] = None,
    ) -> EndpointRecord:
        owner = self._owners.get(cls)
        if owner is not None and owner != url:
            raise ValueError(
                f"{cls.__name__} is already registered for {owner!r}, not {url!r}"
            )
        rec = self._records.setdefault(url, EndpointRecord(url))
        if owner is None:
            rec.classes.append(cls)
            self._owners[cls] = url
        # the first class that documents the url wins
        if rec.summary is None:
            rec.summary = summary
        if rec.description is None:
            rec.description = description
        return rec

    def get(self, url: str) -> Optional[EndpointRecord]:
        return self._records.get(url)

    def __iter__(self) -> Iterator[EndpointRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, url: str) -> bool:
        return url in self._records

    def clear(self) -> None:
        self._records.clear()
        self._owners.clear()


_active_registry: contextvars.ContextVar[PathRegistry] = contextvars.ContextVar(
    "apishape_path_registry", default=PathRegistry()
)


def get_current_path_registry() -> PathRegistry:
    """Registry that @path decorators write into."""
    return _active_registry.get()


@contextmanager
def use_path_registry(reg: PathRegistry) -> Iterator[PathRegistry]:
    """Route @path registrations into `reg` inside the block."""
    token = _active_registry.set(reg)
    try:
        yield reg
    finally:
        _active_registry.reset(token)
