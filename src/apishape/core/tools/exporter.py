from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from apishape.core.compiler import Compiler
from apishape.core.path.export import compile_paths
from apishape.core.path.registry import PathRegistry


def to_yaml(data: Dict[str, Any]) -> str:
    """
    Convert a Python dict to a human-friendly YAML string.

    - Uses safe_dump to avoid arbitrary Python tags.
    - Keeps insertion order for readability.
    - Block style for better diffs/reviews.
    """
    return yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def to_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def build_openapi_document(
    *,
    info: Dict[str, Any],
    compiler: Optional[Compiler] = None,
    registry: Optional[PathRegistry] = None,
) -> Dict[str, Any]:
    """
    Compile the path DSL registry into a full OpenAPI document dict
    (openapi, info, paths, components).
    """
    compiler = compiler or Compiler(info=info)
    compiler.document.info = dict(info)
    return compile_paths(compiler, registry=registry).to_dict()


def export_openapi_yaml(
    *,
    info: Dict[str, Any],
    compiler: Optional[Compiler] = None,
    registry: Optional[PathRegistry] = None,
) -> str:
    """
    Convenience helper to dump the full OpenAPI document to YAML.
    """
    return to_yaml(build_openapi_document(info=info, compiler=compiler, registry=registry))


def write_document(path: str | Path, doc: Dict[str, Any]) -> Path:
    """
    Write a document as JSON when the suffix is .json, YAML otherwise.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".json":
        path.write_text(to_json(doc), encoding="utf-8")
    else:
        path.write_text(to_yaml(doc), encoding="utf-8")
    return path
