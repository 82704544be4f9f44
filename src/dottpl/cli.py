"""Command-line packer: compile a directory of templates into Python modules.

    $ dottpl [--global NAME] [--package FILE] source dest

Files ending in ``.def`` under ``source`` are read first and become snippets
named by their file stem (``partials/head.def`` is ``{{#def.head}}``). Every
template file (``.dot`` and ``.jst`` unless ``--ext`` says otherwise) is then
compiled once and written to ``dest/<name>.py``. Each module registers its
render function in a module-level dict called ``--global`` (``render`` by
default), keyed by the template's path relative to ``source`` without its
extension:

    from templates_out.pages_index import render
    render["pages/index"]({"title": "Home"})

``--package FILE`` additionally concatenates every generated module in
``dest`` into a single bundle module.

Exit status is 1 if any file cannot be read, written or compiled.
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from dottpl import __version__
from dottpl.evaluator import execute
from dottpl.exceptions import TemplateError
from dottpl.runtime import MODULE_IMPORTS
from dottpl.template import compile_source

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".dot", ".jst")
DEFINE_EXTENSION = ".def"

_NON_IDENT_RE = re.compile(r"\W")


def template_key(path: Path, root: Path) -> str:
    """Registry key of a template: relative posix path without extension."""
    return path.relative_to(root).with_suffix("").as_posix()


def module_name(key: str) -> str:
    """Python module/function-safe name for a template key."""
    name = _NON_IDENT_RE.sub("_", key)
    return f"_{name}" if name[:1].isdigit() else name


def load_definitions(source: Path) -> dict[str, Any]:
    """Read every ``.def`` file under ``source`` into a definitions mapping."""
    defs: dict[str, Any] = {}
    for path in sorted(source.rglob(f"*{DEFINE_EXTENSION}")):
        defs.setdefault(path.stem, path.read_text(encoding="utf-8"))
        logger.debug("Loaded define %s from %s", path.stem, path)
    return defs


def render_module(text: str, key: str, defs: dict[str, Any], namespace: str) -> str:
    """Generate the Python module for one template."""
    func_name = f"_tpl_{module_name(key)}"
    source = compile_source(text, dict(defs), name=func_name, filename=key)
    return (
        f'"""Generated by dottpl from {key}. Do not edit."""\n'
        f"{MODULE_IMPORTS}"
        f"\n{namespace} = globals().setdefault({namespace!r}, {{}})\n"
        f"\n\n{source}\n\n"
        f"{namespace}[{key!r}] = {func_name}\n"
    )


def process(source: Path, dest: Path, namespace: str, extensions: Sequence[str]) -> list[Path]:
    """Compile all templates under ``source`` into modules under ``dest``.

    Returns:
        Paths of the written modules.

    Raises:
        OSError: If a file cannot be read or written.
        TemplateError: If a template does not compile.
    """
    defs = load_definitions(source)
    dest.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    for path in sorted(p for p in source.rglob("*") if p.is_file() and p.suffix in extensions):
        key = template_key(path, source)
        module = render_module(path.read_text(encoding="utf-8"), key, defs, namespace)
        target = dest / f"{module_name(key)}.py"
        # Fails here rather than at import time if the generated code is invalid.
        execute(module, {}, str(target))
        target.write_text(module, encoding="utf-8")
        written.append(target)
        print(f"Compiled {path} -> {target}")

    return written


def bundle(dest: Path, package: Path) -> Path:
    """Concatenate generated modules in ``dest`` into one module at ``package``.

    Import and namespace lines are kept once; docstrings, comments and blank
    lines are dropped.
    """
    seen: set[str] = set()
    header: list[str] = []
    body: list[str] = []

    for path in sorted(dest.glob("*.py")):
        for line in path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or stripped.startswith('"""'):
                continue
            if line.startswith("from ") or "= globals().setdefault(" in line:
                if line not in seen:
                    seen.add(line)
                    header.append(line)
                continue
            body.append(line)

    package.parent.mkdir(parents=True, exist_ok=True)
    package.write_text("\n".join(header + body) + "\n", encoding="utf-8")
    return package


def _namespace_name(value: str) -> str:
    if not value.isidentifier():
        raise argparse.ArgumentTypeError(f"{value!r} is not a valid Python identifier")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dottpl",
        description="Compile dottpl templates into importable Python modules.",
    )
    parser.add_argument("source", type=Path, help="directory containing templates")
    parser.add_argument("dest", type=Path, help="directory to write generated modules to")
    parser.add_argument(
        "-g",
        "--global",
        dest="namespace",
        default="render",
        type=_namespace_name,
        help="name of the module-level dict templates register in (default: render)",
    )
    parser.add_argument("-p", "--package", type=Path, help="also bundle all modules into FILE")
    parser.add_argument(
        "--ext",
        action="append",
        dest="extensions",
        help="template file extension to compile (repeatable; default: .dot and .jst)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log compiler debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the packer and return the process exit status."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    extensions = tuple(args.extensions or DEFAULT_EXTENSIONS)
    if not args.source.is_dir():
        sys.stderr.write(f"Source directory not found: {args.source}\n")
        return 1

    try:
        process(args.source, args.dest, args.namespace, extensions)
        if args.package:
            print(f"Packaging all files into {args.package}")
            bundle(args.dest, args.package)
    except OSError as e:
        sys.stderr.write(f"{e}\n")
        return 1
    except TemplateError as e:
        sys.stderr.write(f"{e.format_compact()}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
