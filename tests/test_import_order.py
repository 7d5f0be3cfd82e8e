from __future__ import annotations

import ast
from pathlib import Path

import pytest

_SRC = Path(__file__).parent.parent / "src"

_FIRST_PARTY = {
    path.stem if path.is_file() else path.name
    for path in _SRC.iterdir()
    if (path.is_file() and path.suffix == ".py") or path.is_dir()
}


def _first_party_imports(path: Path) -> list[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"))
    return [
        node.module
        for node in tree.body
        if isinstance(node, ast.ImportFrom)
        and node.module is not None
        and node.module.split(".")[0] in _FIRST_PARTY
    ]


@pytest.mark.parametrize(
    "path",
    sorted(_SRC.rglob("*.py")),
    ids=lambda path: path.relative_to(_SRC).as_posix(),
)
def test_first_party_imports_are_sorted(path: Path) -> None:
    modules = _first_party_imports(path)

    assert modules == sorted(modules)
