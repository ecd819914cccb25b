"""
model.py - Immutable entities produced by the project builder.

A Project is constructed only by ProjectBuilder.as_objects(). Every entity
is a frozen dataclass; mappings are exposed read-only and sequences are
tuples, so a materialized Project can be shared between readers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from .metadata import ResourceType


def freeze(data: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Copy a mapping into a read-only view."""
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class Workflow:
    """The workflow definition and the annotations pointing at its resources."""

    name: str
    namespace: str
    document: Mapping[str, Any]
    source: str
    annotations: Mapping[str, str] = field(default_factory=lambda: freeze({}))
    labels: Mapping[str, str] = field(default_factory=lambda: freeze({}))

    @property
    def description(self) -> str:
        return self.document.get("description") or ""

    @property
    def version(self) -> str:
        version = self.document.get("version")
        return "" if version is None else str(version)


@dataclass(frozen=True)
class PropertiesArtifact:
    """Application properties shipped alongside the workflow."""

    name: str
    namespace: str
    entries: Mapping[str, str]
    source: str

    @property
    def data(self) -> Mapping[str, str]:
        """Alias for entries."""
        return self.entries


@dataclass(frozen=True)
class ResourceGroup:
    """All payloads of one resource type, keyed by original filename."""

    name: str
    namespace: str
    resource_type: ResourceType
    data: Mapping[str, bytes]

    @property
    def filenames(self) -> Tuple[str, ...]:
        return tuple(self.data)


@dataclass(frozen=True)
class Project:
    """Aggregate root: one workflow, optional properties, ordered resource groups."""

    namespace: str
    workflow: Workflow
    properties: Optional[PropertiesArtifact] = None
    resources: Tuple[ResourceGroup, ...] = ()

    def resource_group(self, resource_type: ResourceType) -> Optional[ResourceGroup]:
        """Return the group holding resources of the given type, if any."""
        resource_type = ResourceType.parse(resource_type)
        for group in self.resources:
            if group.resource_type is resource_type:
                return group
        return None
