from pathlib import Path
from typing import Callable

import pytest

from launchpad_agent import ValidatedPath, validate

MakeTree = Callable[[dict[str, str]], Path]


@pytest.fixture
def make_tree(tmp_path: Path) -> MakeTree:
    """Create files under tmp_path/project from {relative path: content}."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            target = root / relative
            if relative.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def project(make_tree: MakeTree) -> ValidatedPath:
    """A small validated project tree."""
    root = make_tree(
        {
            "package.json": '{"name": "demo"}\n',
            "src/a.ts": "export const a = 1;\n",
            "src/b.ts": "import { a } from './a';\nexport const b = a + 1;\n",
            "src/components/Button.tsx": "export function Button() {}\n",
            "node_modules/x.js": "module.exports = 1;\n",
            "README.md": "# Demo\n",
        }
    )
    return validate(str(root))
