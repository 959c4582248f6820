# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Build-info document models (Artifactory wire schema, camelCase keys)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def _str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _mappings(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    return [item for item in data.get(key) or [] if isinstance(item, Mapping)]


def _prune(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value not in ("", None, [], {})}


@dataclass
class Agent:
    name: str = ""
    version: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Agent | None:
        if not isinstance(data, Mapping):
            return None
        return cls(name=_str(data, "name"), version=_str(data, "version"))

    def to_dict(self) -> dict[str, Any]:
        return _prune({"name": self.name, "version": self.version})


@dataclass
class Vcs:
    url: str = ""
    revision: str = ""
    branch: str = ""
    message: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Vcs:
        return cls(url=_str(data, "url"), revision=_str(data, "revision"), branch=_str(data, "branch"), message=_str(data, "message"))

    def to_dict(self) -> dict[str, Any]:
        return _prune({"url": self.url, "revision": self.revision, "branch": self.branch, "message": self.message})


@dataclass
class Artifact:
    name: str = ""
    type: str = ""
    path: str = ""
    sha1: str = ""
    sha256: str = ""
    md5: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Artifact:
        return cls(
            name=_str(data, "name"),
            type=_str(data, "type"),
            path=_str(data, "path"),
            sha1=_str(data, "sha1"),
            sha256=_str(data, "sha256"),
            md5=_str(data, "md5"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _prune({"name": self.name, "type": self.type, "path": self.path, "sha1": self.sha1, "sha256": self.sha256, "md5": self.md5})


@dataclass
class Dependency:
    id: str = ""
    type: str = ""
    scopes: list[str] = field(default_factory=list)
    sha1: str = ""
    sha256: str = ""
    md5: str = ""
    requested_by: list[list[str]] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Dependency:
        requested_by = [[str(item) for item in chain] for chain in data.get("requestedBy") or [] if isinstance(chain, list)]
        return cls(
            id=_str(data, "id"),
            type=_str(data, "type"),
            scopes=[str(item) for item in data.get("scopes") or []],
            sha1=_str(data, "sha1"),
            sha256=_str(data, "sha256"),
            md5=_str(data, "md5"),
            requested_by=requested_by,
        )

    def to_dict(self) -> dict[str, Any]:
        return _prune(
            {
                "id": self.id,
                "type": self.type,
                "scopes": list(self.scopes),
                "sha1": self.sha1,
                "sha256": self.sha256,
                "md5": self.md5,
                "requestedBy": [list(chain) for chain in self.requested_by],
            }
        )


@dataclass
class Module:
    id: str = ""
    type: str = ""
    artifacts: list[Artifact] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Module:
        return cls(
            id=_str(data, "id"),
            type=_str(data, "type"),
            artifacts=[Artifact.from_mapping(item) for item in _mappings(data, "artifacts")],
            dependencies=[Dependency.from_mapping(item) for item in _mappings(data, "dependencies")],
        )

    def to_dict(self) -> dict[str, Any]:
        return _prune(
            {
                "id": self.id,
                "type": self.type,
                "artifacts": [item.to_dict() for item in self.artifacts],
                "dependencies": [item.to_dict() for item in self.dependencies],
            }
        )


@dataclass
class BuildInfo:
    """A build-info document as published to the repository."""

    name: str
    number: str
    started: str = ""
    agent: Agent | None = None
    build_agent: Agent | None = None
    principal: str = ""
    url: str = ""
    vcs: list[Vcs] = field(default_factory=list)
    modules: list[Module] = field(default_factory=list)
    properties: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> BuildInfo:
        raw_properties = data.get("properties")
        properties = {str(k): str(v) for k, v in raw_properties.items()} if isinstance(raw_properties, Mapping) else {}
        return cls(
            name=_str(data, "name"),
            number=_str(data, "number"),
            started=_str(data, "started"),
            agent=Agent.from_mapping(data.get("agent")),
            build_agent=Agent.from_mapping(data.get("buildAgent")),
            principal=_str(data, "principal"),
            url=_str(data, "url"),
            vcs=[Vcs.from_mapping(item) for item in _mappings(data, "vcs")],
            modules=[Module.from_mapping(item) for item in _mappings(data, "modules")],
            properties=properties,
        )

    def to_dict(self) -> dict[str, Any]:
        data = {
            "name": self.name,
            "number": self.number,
            "started": self.started,
            "agent": self.agent.to_dict() if self.agent else None,
            "buildAgent": self.build_agent.to_dict() if self.build_agent else None,
            "principal": self.principal,
            "url": self.url,
            "vcs": [item.to_dict() for item in self.vcs],
            "modules": [item.to_dict() for item in self.modules],
            "properties": dict(self.properties),
        }
        pruned = _prune(data)
        # name and number identify the build and are always sent
        pruned.setdefault("name", self.name)
        pruned.setdefault("number", self.number)
        return pruned


@dataclass
class BuildInfoParams:
    build_name: str
    build_number: str
    project_key: str = ""


@dataclass
class PublishedBuildInfo:
    uri: str = ""
    build_info: BuildInfo | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PublishedBuildInfo:
        raw = data.get("buildInfo")
        return cls(uri=_str(data, "uri"), build_info=BuildInfo.from_mapping(raw) if isinstance(raw, Mapping) else None)


@dataclass
class Sha256Summary:
    """Outcome of a publish: whether it succeeded and the checksum the server reported."""

    succeeded: bool = False
    sha256: str = ""


__all__ = [
    "Agent",
    "Artifact",
    "BuildInfo",
    "BuildInfoParams",
    "Dependency",
    "Module",
    "PublishedBuildInfo",
    "Sha256Summary",
    "Vcs",
]
