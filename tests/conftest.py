"""Shared fixtures for asbuild tests."""

from pathlib import Path
from typing import Dict

import pytest


@pytest.fixture(autouse=True)
def no_sdk_env(monkeypatch):
    """Keep a developer's ASBUILD_SDK from leaking into tests."""
    monkeypatch.delenv("ASBUILD_SDK", raising=False)


@pytest.fixture
def sdk_dir(tmp_path):
    """Create a minimal fake AIR SDK layout."""
    sdk = tmp_path / "sdk"
    (sdk / "frameworks").mkdir(parents=True)
    (sdk / "frameworks" / "air-config.xml").write_text("<flex-config/>")
    (sdk / "lib").mkdir()
    (sdk / "lib" / "compc-cli.jar").write_bytes(b"")
    (sdk / "lib" / "mxmlc-cli.jar").write_bytes(b"")
    return sdk


@pytest.fixture
def write_workspace(tmp_path, sdk_dir):
    """Factory writing a workspace with the given project ini files.

    Usage:
        root = write_workspace({"core": CORE_INI, "app": APP_INI})
        root = write_workspace({}, root_project=ROOT_INI)
    """

    def _write(projects: Dict[str, str], root_project: str = "") -> Path:
        root = tmp_path / "workspace"
        root.mkdir(exist_ok=True)

        lines = ["[workspace]", f"sdk = {sdk_dir}"]
        if projects:
            lines.append("projects =")
            lines.extend(f"    {name}" for name in projects)
        content = "\n".join(lines) + "\n"
        if root_project:
            content += "\n" + root_project
        (root / "asbuild.ini").write_text(content)

        for name, ini in projects.items():
            project_dir = root / name
            (project_dir / "src").mkdir(parents=True, exist_ok=True)
            (project_dir / "asbuild.ini").write_text(ini)

        if root_project:
            (root / "src").mkdir(exist_ok=True)
        return root

    return _write
