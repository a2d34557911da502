"""
Unit tests for asbuild.ini parser.
"""

from pathlib import Path

import pytest

from asbuild.config.ini_parser import AsbuildConfig
from asbuild.config.project_config import (
    ExecutableMode,
    FileSetRef,
    ProjectRef,
    parse_dependency_notation,
)
from asbuild.errors import ProjectConfigError, UnsupportedDependencyError


class TestAsbuildConfig:
    """Test suite for AsbuildConfig parser."""

    @pytest.fixture
    def tmp_ini_path(self, tmp_path):
        """Fixture to provide a temporary INI file path."""
        return tmp_path / "asbuild.ini"

    @pytest.fixture
    def full_config(self, tmp_ini_path):
        """Create a project file using every setting."""
        content = """
[actionscript]
sources =
    src
    generated
configs = config.xml, extra.xml
defines =
    CONFIG::debug, true
    CONFIG::banner, "a, b"
options =
    -strict=true
    -optimize
main_class = game.Main
swc = true
swf = entry
swf_include_all_classes = false
prepare = python gen.py

[dependencies]
bundled = :core
external =
    libs/airglobal.swc
"""
        tmp_ini_path.write_text(content)
        return tmp_ini_path

    def test_missing_file(self, tmp_ini_path):
        with pytest.raises(ProjectConfigError, match="Configuration file not found"):
            AsbuildConfig(tmp_ini_path)

    def test_malformed_file(self, tmp_ini_path):
        tmp_ini_path.write_text("sources = src\n")

        with pytest.raises(ProjectConfigError, match="Failed to parse"):
            AsbuildConfig(tmp_ini_path)

    def test_full_project(self, full_config, tmp_path):
        config = AsbuildConfig(full_config).get_project_config()

        assert config.project_dir == tmp_path
        assert config.sources == (tmp_path / "src", tmp_path / "generated")
        assert config.configs == (tmp_path / "config.xml", tmp_path / "extra.xml")
        assert config.defines == (("CONFIG::debug", "true"), ("CONFIG::banner", '"a, b"'))
        assert config.options == ("-strict=true", "-optimize")
        assert config.main_class == "game.Main"
        assert config.swc is True
        assert config.swf is ExecutableMode.FROM_ENTRY_POINT
        assert config.swf_include_all_classes is False
        assert config.prepare_commands == ("python gen.py",)

    def test_dependencies(self, full_config, tmp_path):
        dependencies = AsbuildConfig(full_config).get_project_config().dependencies

        assert dependencies.bundled == (ProjectRef(":core"),)
        assert dependencies.external == (FileSetRef((tmp_path / "libs" / "airglobal.swc",)),)
        assert dependencies.project_refs() == (ProjectRef(":core"),)

    def test_defaults(self, tmp_ini_path):
        tmp_ini_path.write_text("[actionscript]\n")

        config = AsbuildConfig(tmp_ini_path).get_project_config()

        assert config.sources == ()
        assert config.main_class is None
        assert config.swc is False
        assert config.swf is ExecutableMode.NONE
        assert config.swf_include_all_classes is True
        assert config.dependencies.all() == ()

    def test_missing_project_section(self, tmp_ini_path):
        tmp_ini_path.write_text("[workspace]\nsdk = /opt/air\n")
        config = AsbuildConfig(tmp_ini_path)

        assert config.is_workspace()
        assert not config.is_project()
        with pytest.raises(ProjectConfigError, match=r"No \[actionscript\] section"):
            config.get_project_config()

    def test_invalid_define(self, tmp_ini_path):
        tmp_ini_path.write_text("[actionscript]\ndefines = CONFIG::debug\n")

        with pytest.raises(ProjectConfigError, match="Invalid define"):
            AsbuildConfig(tmp_ini_path).get_project_config()

    def test_invalid_swf_mode(self, tmp_ini_path):
        tmp_ini_path.write_text("[actionscript]\nswf = both\n")

        with pytest.raises(ProjectConfigError, match="Invalid swf mode 'both'"):
            AsbuildConfig(tmp_ini_path).get_project_config()

    def test_invalid_boolean(self, tmp_ini_path):
        tmp_ini_path.write_text("[actionscript]\nswc = maybe\n")

        with pytest.raises(ProjectConfigError, match="Invalid boolean"):
            AsbuildConfig(tmp_ini_path).get_project_config()

    def test_duplicate_across_partitions(self, tmp_ini_path):
        tmp_ini_path.write_text("[actionscript]\n\n[dependencies]\nbundled = :core\nexternal = :core\n")

        with pytest.raises(ProjectConfigError, match="both as bundled and external"):
            AsbuildConfig(tmp_ini_path).get_project_config()

    def test_duplicate_in_partition(self, tmp_ini_path):
        tmp_ini_path.write_text("[actionscript]\n\n[dependencies]\nbundled =\n    :core\n    :core\n")

        with pytest.raises(ProjectConfigError, match="Duplicate entry in 'bundled'"):
            AsbuildConfig(tmp_ini_path).get_project_config()

    def test_interpolation(self, tmp_ini_path):
        tmp_ini_path.write_text("[actionscript]\nroot = src\nsources = ${root}/main\n")

        config = AsbuildConfig(tmp_ini_path).get_project_config()

        assert config.sources == (tmp_ini_path.parent / "src" / "main",)

    def test_escaped_dollar(self, tmp_ini_path):
        tmp_ini_path.write_text("[actionscript]\noptions = -title=$$HOME\ndefines = CONFIG::price, '$$5'\n")

        config = AsbuildConfig(tmp_ini_path).get_project_config()

        assert config.options == ("-title=$HOME",)
        assert config.defines == (("CONFIG::price", "'$5'"),)

    def test_unescaped_dollar(self, tmp_ini_path):
        tmp_ini_path.write_text("[actionscript]\noptions = -title=$HOME\n")

        with pytest.raises(ProjectConfigError, match="Invalid value for 'options'"):
            AsbuildConfig(tmp_ini_path).get_project_config()

    def test_workspace_values(self, tmp_ini_path):
        tmp_ini_path.write_text("[workspace]\nsdk = /opt/air\nprojects =\n    core\n    client/app, tools\n")
        config = AsbuildConfig(tmp_ini_path)

        assert config.get_workspace_value("sdk") == "/opt/air"
        assert config.get_workspace_value("java") == ""
        assert config.get_workspace_projects() == ["core", "client/app", "tools"]


class TestExecutableMode:
    """Test swf mode parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("none", ExecutableMode.NONE),
            ("entry", ExecutableMode.FROM_ENTRY_POINT),
            ("swc", ExecutableMode.FROM_ARCHIVE),
            ("archive", ExecutableMode.FROM_ARCHIVE),
            (" Entry ", ExecutableMode.FROM_ENTRY_POINT),
        ],
    )
    def test_parse(self, value, expected):
        assert ExecutableMode.parse(value) is expected


class TestDependencyNotation:
    """Test dependency notation parsing."""

    def test_project_reference(self, tmp_path):
        ref = parse_dependency_notation(":client:core", tmp_path)

        assert ref == ProjectRef(":client:core")
        assert ref.name == "core"
        assert ref.step_name == ":client:core:compile-archive"

    def test_root_project_reference(self, tmp_path):
        ref = parse_dependency_notation(":", tmp_path)

        assert ref.step_name == ":compile-archive"

    def test_single_file(self, tmp_path):
        ref = parse_dependency_notation("libs/a.swc", tmp_path)

        assert ref == FileSetRef((tmp_path / "libs" / "a.swc",))

    def test_absolute_file(self, tmp_path):
        path = tmp_path / "elsewhere" / "b.swc"

        assert parse_dependency_notation(str(path), Path("/unused")) == FileSetRef((path,))

    def test_glob_is_sorted(self, tmp_path):
        libs = tmp_path / "libs"
        libs.mkdir()
        for name in ["c.swc", "a.swc", "b.swc", "readme.txt"]:
            (libs / name).write_bytes(b"")

        ref = parse_dependency_notation("libs/*.swc", tmp_path)

        assert ref.paths == (libs / "a.swc", libs / "b.swc", libs / "c.swc")

    def test_coordinates_rejected(self, tmp_path):
        with pytest.raises(UnsupportedDependencyError, match="Unsupported dependency kind"):
            parse_dependency_notation("com.example:lib:1.0", tmp_path)
