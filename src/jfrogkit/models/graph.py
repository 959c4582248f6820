# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dependency graph submitted for scanning."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class GraphNode:
    """
    One component in a scan graph.

    ``component_id`` follows the scanner's component identifier scheme, for
    example ``gav://<group>:<artifact>:<version>`` for Maven. For the root of a
    binary scan ``path`` is the file name; for nested components it is the
    internal path. Nodes form a tree; cycles are not detected.
    """

    component_id: str = ""
    sha256: str = ""
    sha1: str = ""
    path: str = ""
    licenses: list[str] = field(default_factory=list)
    nodes: list[GraphNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Wire form; empty fields are omitted."""
        data: dict[str, Any] = {}
        if self.component_id:
            data["component_id"] = self.component_id
        if self.sha256:
            data["sha256"] = self.sha256
        if self.sha1:
            data["sha1"] = self.sha1
        if self.path:
            data["path"] = self.path
        if self.licenses:
            data["licenses"] = list(self.licenses)
        if self.nodes:
            data["nodes"] = [node.to_dict() for node in self.nodes]
        return data

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> GraphNode:
        return cls(
            component_id=str(data.get("component_id") or ""),
            sha256=str(data.get("sha256") or ""),
            sha1=str(data.get("sha1") or ""),
            path=str(data.get("path") or ""),
            licenses=[str(item) for item in data.get("licenses") or []],
            nodes=[cls.from_mapping(child) for child in data.get("nodes") or [] if isinstance(child, Mapping)],
        )

    def walk(self) -> Iterator[GraphNode]:
        """Yield this node and all descendants, depth first."""
        yield self
        for node in self.nodes:
            yield from node.walk()


__all__ = ["GraphNode"]
