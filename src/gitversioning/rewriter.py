"""Apply resolved versions to Maven ``pom.xml`` models."""

from __future__ import annotations

import copy
import logging
import os
import xml.etree.ElementTree as ET
from typing import Callable, Optional

from .common.log_once import LoggingBouncer
from .common.logging_utils import extra_context, is_debug_enabled
from .config import VersioningConfiguration
from .errors import ConfigurationError
from .inspector import GitRepositoryInspector, RepositoryInspector
from .models import GAV, GAVGit
from .resolver import VersionResolver

logger = logging.getLogger(__name__)

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"
DEFAULT_PARENT_RELATIVE_PATH = os.path.join("..", "pom.xml")

ET.register_namespace("", POM_NAMESPACE)

InspectorFactory = Callable[[str], RepositoryInspector]


def _ns(root: ET.Element) -> str:
    """Return the ``{namespace}`` prefix used by ``root``, or ''."""
    if root.tag.startswith("{"):
        return root.tag[:root.tag.index("}") + 1]
    return ""


def _child_text(element: Optional[ET.Element], ns: str, name: str) -> Optional[str]:
    if element is None:
        return None
    child = element.find(f"{ns}{name}")
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def parse_pom(path: str) -> ET.ElementTree:
    """Parse a pom keeping its comments, so a rewritten file only changes versions."""
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    return ET.parse(path, parser=parser)


def is_project_pom(path: Optional[str]) -> bool:
    """Project poms are local ``.xml`` files; poms from repositories end in ``.pom``."""
    return path is not None and os.path.isfile(path) and path.endswith(".xml")


def read_gav(root: ET.Element) -> GAV:
    """Coordinate of a project model; group id and version fall back to the parent."""
    ns = _ns(root)
    parent = root.find(f"{ns}parent")
    return GAV(
        group_id=_child_text(root, ns, "groupId") or _child_text(parent, ns, "groupId"),
        artifact_id=_child_text(root, ns, "artifactId"),
        version=_child_text(root, ns, "version") or _child_text(parent, ns, "version"),
    )


def read_parent_gav(root: ET.Element) -> Optional[GAV]:
    ns = _ns(root)
    parent = root.find(f"{ns}parent")
    if parent is None:
        return None
    return GAV(
        group_id=_child_text(parent, ns, "groupId"),
        artifact_id=_child_text(parent, ns, "artifactId"),
        version=_child_text(parent, ns, "version"),
    )


def parent_pom_path(root: ET.Element, pom_path: str) -> str:
    ns = _ns(root)
    relative = _child_text(root.find(f"{ns}parent"), ns, "relativePath") or DEFAULT_PARENT_RELATIVE_PATH
    path = os.path.normpath(os.path.join(os.path.dirname(pom_path), relative))
    if os.path.isdir(path):
        path = os.path.join(path, "pom.xml")
    return path


def set_properties(root: ET.Element, git_version: GAVGit) -> None:
    """Add or update the ``project.*`` properties describing the version source."""
    ns = _ns(root)
    properties = root.find(f"{ns}properties")
    if properties is None:
        properties = ET.SubElement(root, f"{ns}properties")
    for name, value in git_version.properties().items():
        prop = properties.find(f"{ns}{name}")
        if prop is None:
            prop = ET.SubElement(properties, f"{ns}{name}")
        prop.text = value


class PomRewriter:
    """Rewrites project models with git based versions.

    Args:
        configuration: versioning configuration.
        inspector_factory: builds an inspector for a project directory.
        bouncer: de-duplicates "disabled" and per coordinate log lines.
    """

    def __init__(
        self,
        configuration: VersioningConfiguration,
        inspector_factory: InspectorFactory = GitRepositoryInspector,
        bouncer: Optional[LoggingBouncer] = None,
    ):
        self.configuration = configuration
        self.inspector_factory = inspector_factory
        self.bouncer = bouncer if bouncer is not None else LoggingBouncer()
        self.resolver = VersionResolver(configuration, self.bouncer)

    def _resolve(self, gav: GAV, project_dir: str) -> GAVGit:
        return self.resolver.resolve(gav, self.inspector_factory(project_dir))

    def process(self, pom_path: str) -> ET.ElementTree:
        """Return the model of ``pom_path`` with versions and properties applied.

        The original model is returned untouched when versioning is disabled
        or the model has no version.

        Raises:
            ConfigurationError: if a module declares a version different from its local parent.
        """
        tree = parse_pom(pom_path)
        if not self.configuration.enabled:
            if self.bouncer.add("DISABLED"):
                logger.info("disabled")
            return tree

        if not is_project_pom(pom_path):
            logger.debug("skip - unrelated pom location - %s", pom_path)
            return tree

        root = tree.getroot()
        ns = _ns(root)
        project_gav = read_gav(root)
        if project_gav.version is None:
            logger.warning("skip - invalid model - 'version' is missing - %s", pom_path)
            return tree

        project_dir = os.path.dirname(os.path.abspath(pom_path))
        git_version = self._resolve(project_gav, project_dir)

        if self.bouncer.add(str(project_gav)):
            logger.info(
                "%s:%s - %s: %s -> version: %s",
                project_gav.artifact_id, project_gav.version,
                git_version.ref_type.value, git_version.ref_name, git_version.version,
            )

        virtual_root = copy.deepcopy(root)
        declared_version = _child_text(root, ns, "version")
        if declared_version is not None:
            if is_debug_enabled(logger):
                logger.debug(
                    "set project version to %s in %s", git_version.version, pom_path,
                    extra=extra_context(event="rewrite", component="rewriter", action="set_version"),
                )
            virtual_root.find(f"{ns}version").text = git_version.version

        set_properties(virtual_root, git_version)

        parent_gav = read_parent_gav(root)
        if parent_gav is not None:
            if parent_gav.version is None:
                logger.warning("skip - invalid model - parent 'version' is missing - %s", pom_path)
                return tree

            parent_path = parent_pom_path(root, pom_path)
            if is_project_pom(parent_path):
                if declared_version is not None:
                    logger.warning("Do not set version tag in a multi module project module: %s", pom_path)
                    if declared_version != parent_gav.version:
                        raise ConfigurationError("'version' has to be equal to parent 'version'")

                parent_version = self._resolve(parent_gav, os.path.dirname(parent_path))
                logger.debug("set parent version to %s in %s", parent_version.version, pom_path)
                virtual_root.find(f"{ns}parent/{ns}version").text = parent_version.version

        return ET.ElementTree(virtual_root)

    def write(self, pom_path: str, output_path: Optional[str] = None) -> bool:
        """Process ``pom_path`` and write the result (in place by default).

        Nothing is written while versioning is disabled; returns whether a file was written.
        """
        if not self.configuration.enabled:
            if self.bouncer.add("DISABLED"):
                logger.info("disabled")
            return False
        tree = self.process(pom_path)
        tree.write(output_path or pom_path, encoding="utf-8", xml_declaration=True)
        return True
