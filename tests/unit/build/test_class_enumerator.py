"""Tests for class discovery and class manifest generation."""

from pathlib import Path

import pytest

from asbuild.build.class_enumerator import ClassEnumerator, ClassManifest, class_name_for


class TestClassEnumerator:
    """Test class discovery across source roots."""

    @pytest.fixture
    def roots(self, tmp_path):
        """Create two source roots A and B."""
        a = tmp_path / "A"
        b = tmp_path / "B"
        (a / "foo").mkdir(parents=True)
        b.mkdir()
        (a / "foo" / "Bar.as").write_text("package foo { public class Bar {} }")
        (b / "Baz.as").write_text("package { public class Baz {} }")
        return a, b

    def test_two_roots_in_declaration_order(self, roots):
        a, b = roots
        manifest = ClassEnumerator([a, b]).enumerate()

        assert manifest.classes == ["foo.Bar", "Baz"]

    def test_reversed_roots(self, roots):
        a, b = roots
        manifest = ClassEnumerator([b, a]).enumerate()

        assert manifest.classes == ["Baz", "foo.Bar"]

    def test_ignores_other_files(self, tmp_path):
        src = tmp_path / "src"
        (src / "assets").mkdir(parents=True)
        (src / "Main.as").write_text("")
        (src / "Main.mxml").write_text("")
        (src / "assets" / "logo.png").write_bytes(b"")
        (src / "notes.as.txt").write_text("")

        manifest = ClassEnumerator([src]).enumerate()

        assert manifest.classes == ["Main"]

    def test_sorted_within_root(self, tmp_path):
        src = tmp_path / "src"
        for relative in ["z/Last.as", "a/b/Deep.as", "a/First.as", "Top.as"]:
            path = src / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")

        manifest = ClassEnumerator([src]).enumerate()

        assert manifest.classes == ["Top", "a.First", "a.b.Deep", "z.Last"]

    def test_empty_root(self, tmp_path):
        src = tmp_path / "src"
        src.mkdir()

        assert ClassEnumerator([src]).enumerate().classes == []

    def test_missing_root(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Source directory not found"):
            ClassEnumerator([tmp_path / "missing"]).enumerate()

    def test_generate_writes_manifest(self, roots, tmp_path):
        a, b = roots
        output = tmp_path / "build" / "tmp" / "classes.xml"

        result = ClassEnumerator([a, b]).generate(output)

        assert result == output
        assert output.read_text() == (
            "<flex-config>\n"
            "  <includes>\n"
            "    <symbol>foo.Bar</symbol>\n"
            "    <symbol>Baz</symbol>\n"
            "  </includes>\n"
            "</flex-config>\n"
        )


class TestClassManifest:
    """Test manifest serialization."""

    def test_escapes_text(self):
        xml = ClassManifest(["a.B<C>"]).to_xml()

        assert "<symbol>a.B&lt;C&gt;</symbol>" in xml

    def test_element_structure(self):
        root = ClassManifest(["x.Y", "Z"]).to_element()

        assert root.tag == "flex-config"
        assert [symbol.text for symbol in root.find("includes")] == ["x.Y", "Z"]


def test_class_name_for_nested_path():
    assert class_name_for(Path("game") / "ui" / "Button.as") == "game.ui.Button"


def test_class_name_for_root_file():
    assert class_name_for(Path("Main.as")) == "Main"
