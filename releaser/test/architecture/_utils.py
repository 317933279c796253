from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ImportRef:
    module: str
    line: int


def package_root() -> Path:
    return Path(__file__).resolve().parents[2]


def iter_source_files() -> list[Path]:
    """Non-test modules of the package."""
    root = package_root()
    files: list[Path] = []
    for path in sorted(root.rglob("*.py")):
        rel = path.relative_to(root)
        if rel.parts[0] == "test":
            continue
        if any(part == "__pycache__" or part.startswith(".") for part in rel.parts):
            continue
        files.append(path)
    return files


def read_tree(path: Path) -> ast.AST:
    source = path.read_text(encoding="utf-8")
    return ast.parse(source, filename=str(path))


def parse_imports(path: Path) -> list[ImportRef]:
    imports: list[ImportRef] = []

    for node in ast.walk(read_tree(path)):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.append(ImportRef(module=alias.name, line=node.lineno))
            continue

        if isinstance(node, ast.ImportFrom):
            if node.level and node.level > 0:
                continue
            if node.module is None:
                continue
            imports.append(ImportRef(module=node.module, line=node.lineno))

    return imports


def matches_prefix(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")
