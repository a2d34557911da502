"""
IntelliJ IDEA module descriptor generation.

Writes a Flex-type .iml file per project so the IDE picks up source folders
and inter-project dependencies:
- bundled project dependencies get "Merged" linkage
- external and transitive project dependencies get "External" linkage
- source roots become source folders relative to the project directory

Only project references are modules; file-collection dependencies are
skipped. Source roots outside the project directory get `../` relative URLs.

Module names are the last segment of the project path (`:client:core` is
module `core`, written to `.idea/modules/client/core/core.iml`). Projects
whose paths end in the same segment, such as `:a:lib` and `:b:lib`, share a
module name and IDEA cannot tell them apart; give them distinct directory
names.
"""

import logging
import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List

from ..config.project_config import ProjectRef
from ..config.workspace import Project, Workspace
from ..errors import CyclicDependencyError

MODULE_DIR = "$MODULE_DIR$"
TARGET_PLAYER = "32.0"


class ModuleDescriptorEmitter:
    """Generates .iml module files for workspace projects."""

    def __init__(self, workspace: Workspace):
        self.workspace = workspace

    def collect_transitive(self, project: Project) -> List[ProjectRef]:
        """
        Collect every project reachable through project's dependency sets.

        Returns:
            References in depth-first discovery order, without duplicates

        Raises:
            CyclicDependencyError: If the project references form a cycle
        """
        collected: Dict[ProjectRef, None] = {}
        visiting: List[str] = [project.path]

        def walk(current: Project) -> None:
            for ref in current.config.dependencies.project_refs():
                if ref.project_path in visiting:
                    raise CyclicDependencyError(
                        visiting[visiting.index(ref.project_path):] + [ref.project_path]
                    )
                collected[ref] = None
                visiting.append(ref.project_path)
                walk(self.workspace.get_project(ref.project_path))
                visiting.pop()

        walk(project)
        return list(collected)

    def build_document(self, project: Project) -> ET.Element:
        """Build the module document for a project."""
        dependencies = project.config.dependencies
        bundled = [ref for ref in dependencies.bundled if isinstance(ref, ProjectRef)]
        external = [ref for ref in dependencies.external if isinstance(ref, ProjectRef)]
        direct = set(bundled) | set(external)
        transitive = [ref for ref in self.collect_transitive(project) if ref not in direct]

        name = project.name
        module = ET.Element("module", {"type": "Flex", "version": "4"})

        manager = ET.SubElement(
            module, "component", {"name": "FlexBuildConfigurationManager", "active": name}
        )
        configuration = ET.SubElement(
            ET.SubElement(manager, "configurations"),
            "configuration",
            {
                "name": name,
                "target-platform": "Desktop",
                "pure-as": "true",
                "output-type": "Library",
                "skip-build": "true",
            },
        )
        deps_element = ET.SubElement(configuration, "dependencies", {"target-player": TARGET_PLAYER})
        entries = ET.SubElement(deps_element, "entries")

        for ref in bundled:
            _add_entry(entries, ref.name, "Merged")
        for ref in external + transitive:
            _add_entry(entries, ref.name, "External")

        ET.SubElement(deps_element, "sdk", {"name": "SDK"})
        compiler_options = ET.SubElement(configuration, "compiler-options")
        ET.SubElement(
            compiler_options,
            "option",
            {"name": "additionalConfigFilePath", "value": f"{MODULE_DIR}/config.xml"},
        )
        for packaging in ("packaging-air-desktop", "packaging-android", "packaging-ios"):
            ET.SubElement(configuration, packaging)
        ET.SubElement(manager, "compiler-options")

        root_manager = ET.SubElement(
            module, "component", {"name": "NewModuleRootManager", "inherit-compiler-output": "true"}
        )
        ET.SubElement(root_manager, "exclude-output")
        content_url = self.content_url(project)
        content = ET.SubElement(root_manager, "content", {"url": content_url})
        for source in project.config.sources:
            relative = Path(os.path.relpath(source, project.project_dir)).as_posix()
            ET.SubElement(
                content,
                "sourceFolder",
                {"url": f"{content_url}/{relative}", "isTestSource": "false"},
            )

        ET.SubElement(
            root_manager,
            "orderEntry",
            {"type": "jdk", "jdkName": "SDK", "jdkType": "Flex SDK Type (new)"},
        )
        ET.SubElement(root_manager, "orderEntry", {"type": "sourceFolder", "forTests": "false"})
        for ref in bundled + external + transitive:
            ET.SubElement(
                root_manager,
                "orderEntry",
                {"type": "module", "module-name": ref.name, "exported": ""},
            )

        return module

    def content_url(self, project: Project) -> str:
        """URL of the project directory relative to the .iml location."""
        segments = self.path_segments(project)
        dots = "/.." * (2 + len(segments))
        suffix = "".join(f"/{segment}" for segment in segments)
        return f"file://{MODULE_DIR}{dots}{suffix}"

    def descriptor_path(self, project: Project) -> Path:
        """Location of the .iml: <root>/.idea/modules/<path segments>/<name>.iml"""
        module_dir = self.workspace.root_dir / ".idea" / "modules"
        for segment in self.path_segments(project):
            module_dir = module_dir / segment
        return module_dir / f"{project.name}.iml"

    @staticmethod
    def path_segments(project: Project) -> List[str]:
        return [segment for segment in project.path.split(":") if segment]

    def to_xml(self, project: Project) -> str:
        document = self.build_document(project)
        ET.indent(document, space="  ")
        body = ET.tostring(document, encoding="unicode")
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'

    def generate(self, project: Project) -> Path:
        """Write the module descriptor for a project and return its path."""
        xml = self.to_xml(project)
        output_path = self.descriptor_path(project)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(xml, encoding="utf-8")
        logging.info(f"Wrote IDEA module descriptor: {output_path}")
        return output_path


def _add_entry(entries: ET.Element, module_name: str, linkage: str) -> None:
    entry = ET.SubElement(
        entries,
        "entry",
        {"module-name": module_name, "build-configuration-name": module_name},
    )
    ET.SubElement(entry, "dependency", {"linkage": linkage})
