"""
Class discovery for "include all classes" executable builds.

This module handles:
- Walking every source root for .as files
- Deriving fully-qualified class names from relative paths
- Writing the class manifest as an mxmlc config file (<includes> symbols)
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from ..config.project_config import SOURCE_EXTENSION


@dataclass
class ClassManifest:
    """Fully-qualified class names in discovery order."""

    classes: List[str]

    def to_element(self) -> ET.Element:
        """Build the manifest document.

        Example:
            <flex-config>
              <includes>
                <symbol>game.Main</symbol>
              </includes>
            </flex-config>
        """
        root = ET.Element("flex-config")
        includes = ET.SubElement(root, "includes")
        for class_name in self.classes:
            ET.SubElement(includes, "symbol").text = class_name
        return root

    def to_xml(self) -> str:
        root = self.to_element()
        ET.indent(root, space="  ")
        return ET.tostring(root, encoding="unicode") + "\n"

    def write(self, output_path: Path) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.to_xml(), encoding="utf-8")
        return output_path


class ClassEnumerator:
    """
    Scans source roots for compilable ActionScript classes.

    Roots are visited in declaration order; files inside a root are visited
    in lexical order of their relative path so the manifest is reproducible.
    """

    def __init__(self, source_dirs: Iterable[Path]):
        """
        Initialize class enumerator.

        Args:
            source_dirs: Source roots, in declaration order
        """
        self.source_dirs = [Path(source) for source in source_dirs]

    def enumerate(self) -> ClassManifest:
        """
        Discover every class under the configured source roots.

        Returns:
            ClassManifest with one entry per .as file

        Raises:
            FileNotFoundError: If a source root does not exist
        """
        classes = []
        for source_dir in self.source_dirs:
            if not source_dir.is_dir():
                raise FileNotFoundError(f"Source directory not found: {source_dir}")

            relative_files = sorted(
                path.relative_to(source_dir)
                for path in source_dir.rglob(f"*{SOURCE_EXTENSION}")
                if path.is_file()
            )
            classes.extend(class_name_for(relative) for relative in relative_files)

        logging.debug(f"Discovered {len(classes)} classes in {len(self.source_dirs)} source roots")
        return ClassManifest(classes)

    def generate(self, output_path: Path) -> Path:
        """Enumerate classes and write the manifest to output_path."""
        return self.enumerate().write(output_path)


def class_name_for(relative: Path) -> str:
    """
    Derive a class name from a path relative to its source root.

    Example:
        >>> class_name_for(Path('game/ui/Button.as'))
        'game.ui.Button'
    """
    class_name = relative.name[: -len(SOURCE_EXTENSION)]
    package_parts = relative.parent.parts
    if not package_parts:
        return class_name
    return ".".join(package_parts) + "." + class_name
