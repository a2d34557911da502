"""Tests for extracting the executable SWF from a SWC archive."""

import zipfile

import pytest

from asbuild.build.archive_extractor import ArchiveExtractor
from asbuild.errors import ArchiveExtractionError


@pytest.fixture
def layout(tmp_path):
    libs = tmp_path / "build" / "libs"
    libs.mkdir(parents=True)
    return libs / "library.swc", tmp_path / "build" / "tmp", libs / "executable.swf"


def write_archive(path, members):
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)


class TestArchiveExtractor:
    """Test SWF extraction."""

    def test_extracts_library_swf(self, layout):
        archive, tmp_dir, output = layout
        write_archive(archive, {"catalog.xml": "<swc/>", "library.swf": b"FWS\x0a"})

        result = ArchiveExtractor(show_progress=False).extract_executable(archive, tmp_dir, output)

        assert result == output
        assert output.read_bytes() == b"FWS\x0a"
        assert (tmp_dir / "catalog.xml").exists()

    def test_overwrites_previous_executable(self, layout):
        archive, tmp_dir, output = layout
        output.write_bytes(b"old")
        write_archive(archive, {"library.swf": b"new"})

        ArchiveExtractor(show_progress=False).extract_executable(archive, tmp_dir, output)

        assert output.read_bytes() == b"new"

    def test_missing_archive(self, layout):
        archive, tmp_dir, output = layout

        with pytest.raises(ArchiveExtractionError, match="Archive not found"):
            ArchiveExtractor(show_progress=False).extract_executable(archive, tmp_dir, output)

    def test_invalid_archive(self, layout):
        archive, tmp_dir, output = layout
        archive.write_bytes(b"not a zip")

        with pytest.raises(ArchiveExtractionError, match="Invalid archive"):
            ArchiveExtractor(show_progress=False).extract_executable(archive, tmp_dir, output)

    def test_archive_without_swf(self, layout):
        archive, tmp_dir, output = layout
        write_archive(archive, {"catalog.xml": "<swc/>"})

        with pytest.raises(ArchiveExtractionError, match="does not contain library.swf"):
            ArchiveExtractor(show_progress=False).extract_executable(archive, tmp_dir, output)
        assert not output.exists()

    def test_progress_message(self, layout, capsys):
        archive, tmp_dir, output = layout
        write_archive(archive, {"library.swf": b""})

        ArchiveExtractor().extract_executable(archive, tmp_dir, output)

        assert "Extracting library.swf from library.swc" in capsys.readouterr().out
