"""Shared fixture: a small repository tree written to tmp_path."""

from pathlib import Path

import pytest

_FILES: dict[str, str] = {
    "README.md": (
        "# Hello\n\n## Installation\n\npip install hello\n\n## Usage\n\n"
        "```python\nimport hello\n```\n"
    ),
    "pyproject.toml": (
        '[project]\nname = "hello"\n'
        'dependencies = ["httpx>=0.27", "pydantic"]\n\n'
        '[project.optional-dependencies]\ntest = ["pytest"]\n'
    ),
    "uv.lock": "",
    "hello/__init__.py": "",
    "hello/core.py": (
        "# Core greeting logic\n"
        "class Greeter:\n"
        "    def greet(self, name):\n"
        "        if name and name.strip():\n"
        "            return f'hello {name}'\n"
        "        return 'hello'\n"
    ),
    "hello/app.js": "function main() {\n  return 1;\n}\n",
    "tests/test_core.py": (
        "from hello.core import Greeter\n\n"
        "def test_greet():\n"
        "    assert Greeter().greet('a') == 'hello a'\n"
        "    assert Greeter().greet('') == 'hello'\n"
    ),
    "node_modules/dep/index.js": "function vendored() {}\n",
    ".git/config": "[core]\n",
    "docs/index.md": "docs\n",
    "CHANGELOG.md": "v1\n",
}


@pytest.fixture
def repository(tmp_path: Path) -> Path:
    for relative_path, content in _FILES.items():
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path
