# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Graph scan request/result models."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from .graph import GraphNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectSelection:
    """Apply the watches attached to a project."""

    project_key: str

    def query_params(self) -> list[tuple[str, str]]:
        return [("project", self.project_key)]


@dataclass(frozen=True)
class RepoPathSelection:
    """Apply the watches covering the repository path the artifact will be deployed to."""

    repo_path: str

    def query_params(self) -> list[tuple[str, str]]:
        return [("repo_path", self.repo_path)]


@dataclass(frozen=True)
class WatchesSelection:
    """Apply an explicit list of named watches."""

    watches: tuple[str, ...]

    def query_params(self) -> list[tuple[str, str]]:
        return [("watch", watch) for watch in self.watches]


ScanSelection = Union[ProjectSelection, RepoPathSelection, WatchesSelection]


def select_scope(
    project_key: str | None = None,
    repo_path: str | None = None,
    watches: Sequence[str] | None = None,
) -> ScanSelection | None:
    """
    Pick one selection mode: project key, then repo path, then watches.

    Lower-precedence values supplied alongside a higher one are dropped with a
    warning so the caller can see what was not applied.
    """
    watch_list = tuple(w for w in (watches or ()) if w)
    supplied = [name for name, value in (("project", project_key), ("repo_path", repo_path), ("watches", watch_list)) if value]
    if len(supplied) > 1:
        logger.warning("Multiple scan scopes supplied (%s); using %s and ignoring the rest", ", ".join(supplied), supplied[0])

    if project_key:
        return ProjectSelection(project_key)
    if repo_path:
        return RepoPathSelection(repo_path)
    if watch_list:
        return WatchesSelection(watch_list)
    return None


@dataclass
class ScanRequest:
    """A dependency graph plus the scope whose policies should apply to it."""

    graph: GraphNode
    selection: ScanSelection | None = None

    @classmethod
    def create(
        cls,
        graph: GraphNode,
        *,
        project_key: str | None = None,
        repo_path: str | None = None,
        watches: Sequence[str] | None = None,
    ) -> ScanRequest:
        return cls(graph=graph, selection=select_scope(project_key, repo_path, watches))

    def query_params(self) -> list[tuple[str, str]]:
        return self.selection.query_params() if self.selection is not None else []


def _str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _str_list(data: Mapping[str, Any], key: str) -> list[str]:
    return [str(item) for item in data.get(key) or [] if item is not None]


def _mappings(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    return [item for item in data.get(key) or [] if isinstance(item, Mapping)]


def _prune(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value not in ("", None, [], {}, False)}


@dataclass
class ImpactPathNode:
    component_id: str = ""
    full_path: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ImpactPathNode:
        return cls(component_id=_str(data, "component_id"), full_path=_str(data, "full_path"))

    def to_dict(self) -> dict[str, Any]:
        return _prune({"component_id": self.component_id, "full_path": self.full_path})


@dataclass
class Component:
    """Per-component detail attached to an issue: fix versions and how it is pulled in."""

    fixed_versions: list[str] = field(default_factory=list)
    impact_paths: list[list[ImpactPathNode]] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Component:
        paths = []
        for path in data.get("impact_paths") or []:
            if isinstance(path, list):
                paths.append([ImpactPathNode.from_mapping(node) for node in path if isinstance(node, Mapping)])
        return cls(fixed_versions=_str_list(data, "fixed_versions"), impact_paths=paths)

    def to_dict(self) -> dict[str, Any]:
        return _prune(
            {
                "fixed_versions": list(self.fixed_versions),
                "impact_paths": [[node.to_dict() for node in path] for path in self.impact_paths],
            }
        )


def _components(data: Mapping[str, Any]) -> dict[str, Component]:
    raw = data.get("components")
    if not isinstance(raw, Mapping):
        return {}
    return {str(key): Component.from_mapping(value) for key, value in raw.items() if isinstance(value, Mapping)}


@dataclass
class Cve:
    cve: str = ""
    cvss_v2_score: str = ""
    cvss_v2_vector: str = ""
    cvss_v3_score: str = ""
    cvss_v3_vector: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Cve:
        return cls(
            cve=_str(data, "cve"),
            cvss_v2_score=_str(data, "cvss_v2_score"),
            cvss_v2_vector=_str(data, "cvss_v2_vector"),
            cvss_v3_score=_str(data, "cvss_v3_score"),
            cvss_v3_vector=_str(data, "cvss_v3_vector"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _prune(
            {
                "cve": self.cve,
                "cvss_v2_score": self.cvss_v2_score,
                "cvss_v2_vector": self.cvss_v2_vector,
                "cvss_v3_score": self.cvss_v3_score,
                "cvss_v3_vector": self.cvss_v3_vector,
            }
        )


@dataclass
class Violation:
    """An issue that breaks a watch policy."""

    summary: str = ""
    severity: str = ""
    violation_type: str = ""
    components: dict[str, Component] = field(default_factory=dict)
    watch_name: str = ""
    issue_id: str = ""
    cves: list[Cve] = field(default_factory=list)
    references: list[str] = field(default_factory=list)
    fail_build: bool = False
    license_key: str = ""
    license_name: str = ""
    ignore_url: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Violation:
        return cls(
            summary=_str(data, "summary"),
            severity=_str(data, "severity"),
            violation_type=_str(data, "type"),
            components=_components(data),
            watch_name=_str(data, "watch_name"),
            issue_id=_str(data, "issue_id"),
            cves=[Cve.from_mapping(item) for item in _mappings(data, "cves")],
            references=_str_list(data, "references"),
            fail_build=bool(data.get("fail_build")),
            license_key=_str(data, "license_key"),
            license_name=_str(data, "license_name"),
            ignore_url=_str(data, "ignore_url"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _prune(
            {
                "summary": self.summary,
                "severity": self.severity,
                "type": self.violation_type,
                "components": {key: value.to_dict() for key, value in self.components.items()},
                "watch_name": self.watch_name,
                "issue_id": self.issue_id,
                "cves": [cve.to_dict() for cve in self.cves],
                "references": list(self.references),
                "fail_build": self.fail_build,
                "license_key": self.license_key,
                "license_name": self.license_name,
                "ignore_url": self.ignore_url,
            }
        )


@dataclass
class Vulnerability:
    cves: list[Cve] = field(default_factory=list)
    summary: str = ""
    severity: str = ""
    vulnerable_components: list[str] = field(default_factory=list)
    components: dict[str, Component] = field(default_factory=dict)
    issue_id: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Vulnerability:
        return cls(
            cves=[Cve.from_mapping(item) for item in _mappings(data, "cves")],
            summary=_str(data, "summary"),
            severity=_str(data, "severity"),
            vulnerable_components=_str_list(data, "vulnerable_components"),
            components=_components(data),
            issue_id=_str(data, "issue_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _prune(
            {
                "cves": [cve.to_dict() for cve in self.cves],
                "summary": self.summary,
                "severity": self.severity,
                "vulnerable_components": list(self.vulnerable_components),
                "components": {key: value.to_dict() for key, value in self.components.items()},
                "issue_id": self.issue_id,
            }
        )


@dataclass
class License:
    key: str = ""
    name: str = ""
    components: dict[str, Component] = field(default_factory=dict)
    custom: bool = False
    references: list[str] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> License:
        return cls(
            key=_str(data, "license_key"),
            name=_str(data, "name"),
            components=_components(data),
            custom=bool(data.get("custom")),
            references=_str_list(data, "references"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _prune(
            {
                "license_key": self.key,
                "name": self.name,
                "components": {key: value.to_dict() for key, value in self.components.items()},
                "custom": self.custom,
                "references": list(self.references),
            }
        )


@dataclass
class ScanResult:
    """Terminal outcome of a graph scan."""

    scan_id: str = ""
    violations: list[Violation] = field(default_factory=list)
    vulnerabilities: list[Vulnerability] = field(default_factory=list)
    licenses: list[License] = field(default_factory=list)
    component_id: str = ""
    package_type: str = ""
    status: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ScanResult:
        return cls(
            scan_id=_str(data, "scan_id"),
            violations=[Violation.from_mapping(item) for item in _mappings(data, "violations")],
            vulnerabilities=[Vulnerability.from_mapping(item) for item in _mappings(data, "vulnerabilities")],
            licenses=[License.from_mapping(item) for item in _mappings(data, "licenses")],
            component_id=_str(data, "component_id"),
            package_type=_str(data, "package_type"),
            status=_str(data, "status"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "scan_id": self.scan_id,
            "component_id": self.component_id,
            "package_type": self.package_type,
            "status": self.status,
            "violations": [item.to_dict() for item in self.violations],
            "vulnerabilities": [item.to_dict() for item in self.vulnerabilities],
            "licenses": [item.to_dict() for item in self.licenses],
        }

    @property
    def fail_build(self) -> bool:
        """True when any violation is configured to fail the build."""
        return any(violation.fail_build for violation in self.violations)


__all__ = [
    "Component",
    "Cve",
    "ImpactPathNode",
    "License",
    "ProjectSelection",
    "RepoPathSelection",
    "ScanRequest",
    "ScanResult",
    "ScanSelection",
    "Violation",
    "Vulnerability",
    "WatchesSelection",
    "select_scope",
]
