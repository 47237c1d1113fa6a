"""Parsers for POM and ivy.xml descriptors and maven-metadata.xml listings."""
from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

from ..errors import ResolutionError
from .types import Info, Module, Project

_PROPERTY_RE = re.compile(r"\$\{([^}]+)\}")
_MAX_INTERPOLATION_PASSES = 5


def _local(tag: str) -> str:
    """Tag name without its namespace."""
    return tag.rsplit("}", 1)[-1]


def _child(elem: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    if elem is None:
        return None
    for child in elem:
        if isinstance(child.tag, str) and _local(child.tag) == name:
            return child
    return None


def _text(elem: Optional[ET.Element], name: str) -> Optional[str]:
    child = _child(elem, name)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def _parse_xml(text: str, what: str) -> ET.Element:
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        raise ResolutionError(f"malformed {what}: {exc}") from exc


def _interpolate(value: Optional[str], properties: Dict[str, str]) -> Optional[str]:
    if value is None:
        return None
    for _ in range(_MAX_INTERPOLATION_PASSES):
        replaced = _PROPERTY_RE.sub(lambda m: properties.get(m.group(1), m.group(0)), value)
        if replaced == value:
            break
        value = replaced
    return value


def _pom_properties(root: ET.Element, parent: Optional[ET.Element]) -> Dict[str, str]:
    group_id = _text(root, "groupId") or _text(parent, "groupId") or ""
    artifact_id = _text(root, "artifactId") or ""
    version = _text(root, "version") or _text(parent, "version") or ""
    properties: Dict[str, str] = {}
    props_elem = _child(root, "properties")
    if props_elem is not None:
        for prop in props_elem:
            if isinstance(prop.tag, str) and prop.text is not None:
                properties[_local(prop.tag)] = prop.text.strip()
    for prefix in ("project", "pom"):
        properties[f"{prefix}.groupId"] = group_id
        properties[f"{prefix}.artifactId"] = artifact_id
        properties[f"{prefix}.version"] = version
        if parent is not None:
            properties[f"{prefix}.parent.groupId"] = _text(parent, "groupId") or ""
            properties[f"{prefix}.parent.version"] = _text(parent, "version") or ""
    return properties


def parse_pom(text: str, module: Module, version: str) -> Project:
    """Build a Project from POM XML.

    Raises:
        ResolutionError: if the document is not a parseable POM.
    """
    root = _parse_xml(text, "POM")
    if _local(root.tag) != "project":
        raise ResolutionError(f"expected <project> root, got <{_local(root.tag)}>")

    parent_elem = _child(root, "parent")
    properties = _pom_properties(root, parent_elem)

    parent = None
    if parent_elem is not None:
        parent_group = _interpolate(_text(parent_elem, "groupId"), properties)
        parent_artifact = _interpolate(_text(parent_elem, "artifactId"), properties)
        parent_version = _interpolate(_text(parent_elem, "version"), properties)
        if parent_group and parent_artifact and parent_version:
            parent = (Module(parent_group, parent_artifact), parent_version)

    scm_url = _interpolate(_text(_child(root, "scm"), "url"), properties)
    homepage = _interpolate(_text(root, "url"), properties) or ""
    return Project(module=module, version=version, parent=parent, info=Info(homepage=homepage, scm_url=scm_url))


def parse_ivy(text: str, module: Module, version: str) -> Project:
    """Build a Project from an ivy.xml descriptor.

    The homepage comes from ``info/description/@homepage`` and the parent
    from ``info/extends``.

    Raises:
        ResolutionError: if the document is not a parseable ivy module.
    """
    root = _parse_xml(text, "ivy.xml")
    if _local(root.tag) != "ivy-module":
        raise ResolutionError(f"expected <ivy-module> root, got <{_local(root.tag)}>")
    info = _child(root, "info")
    if info is None:
        raise ResolutionError("ivy.xml has no <info> element")

    homepage = ""
    description = _child(info, "description")
    if description is not None:
        homepage = (description.get("homepage") or "").strip()

    parent = None
    extends = _child(info, "extends")
    if extends is not None:
        organisation = extends.get("organisation")
        name = extends.get("module")
        revision = extends.get("revision")
        if organisation and name and revision:
            parent = (Module(organisation, name), revision)

    return Project(module=module, version=version, parent=parent, info=Info(homepage=homepage))


def parse_maven_metadata(text: str) -> List[str]:
    """Return ``versioning/versions/version`` entries in document order."""
    root = _parse_xml(text, "maven-metadata.xml")
    versions_elem = _child(_child(root, "versioning"), "versions")
    if versions_elem is None:
        return []
    versions = []
    for item in versions_elem:
        if isinstance(item.tag, str) and _local(item.tag) == "version" and item.text and item.text.strip():
            versions.append(item.text.strip())
    return versions
