"""SWF extraction from SWC archives.

A SWC is a zip file holding catalog.xml and library.swf. When the executable
is built from the archive, library.swf is unpacked into build/tmp and copied
to build/libs under the executable's conventional name. The result has every
class of the archive but no entry point.
"""

import logging
import shutil
import zipfile
from pathlib import Path

from ..errors import ArchiveExtractionError

LIBRARY_SWF_NAME = "library.swf"


class ArchiveExtractor:
    """Extracts the library SWF out of a compiled SWC."""

    def __init__(self, show_progress: bool = True):
        self.show_progress = show_progress

    def extract_executable(self, archive_path: Path, tmp_dir: Path, output_path: Path) -> Path:
        """Unpack archive_path into tmp_dir and copy its SWF to output_path.

        Args:
            archive_path: Path to the compiled library.swc
            tmp_dir: Directory the archive is unpacked into
            output_path: Destination of the executable SWF

        Returns:
            Path to the extracted SWF

        Raises:
            ArchiveExtractionError: If the archive is missing, invalid or has no SWF
        """
        if not archive_path.exists():
            raise ArchiveExtractionError(f"Archive not found: {archive_path}")

        if self.show_progress:
            print(f"Extracting {LIBRARY_SWF_NAME} from {archive_path.name}...")

        try:
            tmp_dir.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(archive_path, "r") as zf:
                zf.extractall(tmp_dir)
        except zipfile.BadZipFile as e:
            raise ArchiveExtractionError(f"Invalid archive {archive_path}: {e}") from e

        extracted = tmp_dir / LIBRARY_SWF_NAME
        if not extracted.exists():
            raise ArchiveExtractionError(f"{archive_path} does not contain {LIBRARY_SWF_NAME}")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(extracted, output_path)
        logging.debug(f"Copied {extracted} to {output_path}")
        return output_path
