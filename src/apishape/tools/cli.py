from __future__ import annotations

import argparse
import importlib.util
import logging
import sys
from pathlib import Path
from typing import Iterable, List

from apishape.core.compiler import Compiler
from apishape.core.errors import CompileError
from apishape.core.path.export import compile_paths
from apishape.core.path.registry import PathRegistry, use_path_registry
from apishape.core.tools.exporter import write_document

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _iter_py_files(root: Path) -> Iterable[Path]:
    """
    Yield `root` itself if it is a file, else all Python files under it.
    """
    if root.is_file():
        yield root
        return
    for p in sorted(root.rglob("*.py")):
        yield p


def _import_module_from_file(pyfile: Path):
    """
    Import a Python file as a transient module; no package layout required.
    The module key is derived from the path to avoid name collisions.
    """
    module_name = f"dsl_{pyfile.stem}_{abs(hash(pyfile.resolve()))}"
    spec = importlib.util.spec_from_file_location(module_name, pyfile)
    if spec is None or spec.loader is None:
        raise SystemExit(f"cannot import {pyfile}")
    mod = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = mod
    spec.loader.exec_module(mod)
    return mod


def run_export(
    *,
    modules: List[Path],
    out: Path,
    title: str,
    version: str,
    description: str = "",
) -> Path:
    """
    High-level pipeline:
      1) Import every DSL module into a fresh PathRegistry
      2) Compile the recorded operations into one document
      3) Write it to `out` (JSON for .json, YAML otherwise)
    Returns:
      Path to the written document
    """
    info = {"title": title, "version": version}
    if description:
        info["description"] = description

    reg = PathRegistry()
    with use_path_registry(reg):
        for root in modules:
            if not root.exists():
                raise SystemExit(f"DSL module not found: {root}")
            for py in _iter_py_files(root):
                logger.info("loading %s", py)
                _import_module_from_file(py)

    compiler = Compiler(info=info)
    try:
        document = compile_paths(compiler, registry=reg)
    except CompileError as err:
        raise SystemExit(f"compile failed: {err}") from err

    path = write_document(out, document.to_dict())
    logger.info(
        "wrote %s (%d paths, %d schemas)",
        path,
        len(document.paths),
        len(document.components),
    )
    return path


def main(argv: List[str] | None = None) -> None:
    """
    CLI entry point.
    """
    ap = argparse.ArgumentParser(
        prog="apishape-export",
        description="Compile path DSL modules into an OpenAPI 3.1 document.",
    )
    ap.add_argument(
        "--module",
        action="append",
        required=True,
        help="DSL Python file or directory; repeatable.",
    )
    ap.add_argument("--out", required=True, help="Output file (.yaml or .json).")
    ap.add_argument("--title", default="API", help="OpenAPI info.title")
    ap.add_argument("--version", default="1.0.0", help="OpenAPI info.version")
    ap.add_argument("--description", default="", help="OpenAPI info.description")
    ap.add_argument("--log-level", default="WARNING", help="Logging level.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Verbose logs.")
    args = ap.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else args.log_level.upper())

    run_export(
        modules=[Path(m).resolve() for m in args.module],
        out=Path(args.out).resolve(),
        title=args.title,
        version=args.version,
        description=args.description,
    )


if __name__ == "__main__":
    main()
