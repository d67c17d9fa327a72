"""Tests for project metadata in ``pyproject.toml``."""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).parent.parent


class TestProjectMetadata:
    def test_readme_is_project_readme(self):
        project = tomllib.loads((ROOT / "pyproject.toml").read_text())["project"]

        assert project["readme"] == "README.md"
        assert (ROOT / project["readme"]).is_file()
