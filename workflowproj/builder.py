"""
builder.py - Fluent builder assembling a workflow project.

The builder accumulates inputs, then materializes them once into an
immutable Project or writes the project as Kubernetes manifests.

Lifecycle:
    Empty -> Accumulating (any order, any count of with_* / add_* calls)
          -> Materialized (terminal; the Project is cached)

Inputs are read exactly once, when they are registered, so a read failure
raises ProjectIOError from the with_* / add_* call itself. Parsing,
classification and naming happen in as_objects().

Usage:
    from workflowproj import new

    project = (
        new("default")
        .with_workflow(Path("hello.sw.json"))
        .with_properties(Path("application.properties"))
        .add_resource("myopenapi.json", Path("specs/myopenapi.json"))
        .as_objects()
    )
    project.resources[0].name  # "hello-openapis"
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .config import BuilderConfig
from .errors import BuilderStateError, ValidationError
from .manifests import project_to_manifests, write_manifests
from .metadata import ResourceType, workflow_app_label
from .model import Project, PropertiesArtifact, ResourceGroup, Workflow, freeze
from .naming import derive_names
from .properties import parse_properties
from .resources import ResourceEntry, group_resources, validate_filename
from .sources import Source, decode_text, read_source
from .workflow import parse_workflow

logger = logging.getLogger(__name__)

_ResourceKey = Tuple[Optional[str], str]


def _resource_type_key(resource_type: Optional[Union[ResourceType, str]]) -> Optional[str]:
    """Canonical key for an explicit type; unrecognized strings are kept as given."""
    if resource_type is None:
        return None
    member = ResourceType.lookup(resource_type)
    return member.value if member is not None else str(resource_type)


class ProjectBuilder:
    """Accumulates workflow project inputs and materializes them once.

    Every configuration method returns the builder so calls can be chained.
    The builder is meant for a single caller; it is not thread-safe.
    """

    def __init__(self, namespace: str, config: Optional[BuilderConfig] = None):
        self._namespace = namespace
        self._config = config or BuilderConfig()
        self._name: Optional[str] = None
        self._workflow: Optional[bytes] = None
        self._properties: Optional[bytes] = None
        # (canonical type value or None, filename) -> entry, in first registration order
        self._resources: Dict[_ResourceKey, ResourceEntry] = {}
        self._sequence = 0
        self._project: Optional[Project] = None

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def config(self) -> BuilderConfig:
        return self._config

    @property
    def materialized(self) -> bool:
        return self._project is not None

    def _check_mutable(self) -> None:
        if self._project is not None:
            raise BuilderStateError(
                f"project '{self._project.workflow.name}' is already materialized"
            )

    # =========================================================================
    # Configuration
    # =========================================================================

    def named(self, name: str) -> "ProjectBuilder":
        """Override the base name otherwise taken from the workflow id."""
        self._check_mutable()
        self._name = name
        return self

    def with_workflow(self, source: Source) -> "ProjectBuilder":
        """Register the workflow document. A later call replaces an earlier one."""
        self._check_mutable()
        self._workflow = read_source(source, "workflow")
        logger.debug("Registered workflow (%d bytes)", len(self._workflow))
        return self

    def with_properties(self, source: Source) -> "ProjectBuilder":
        """Register the application properties. A later call replaces an earlier one."""
        self._check_mutable()
        self._properties = read_source(source, "properties")
        logger.debug("Registered properties (%d bytes)", len(self._properties))
        return self

    with_app_properties = with_properties

    def add_resource(
        self,
        filename: str,
        source: Source,
        resource_type: Optional[Union[ResourceType, str]] = None,
    ) -> "ProjectBuilder":
        """Register a resource; its type is inferred unless given."""
        self._check_mutable()
        validate_filename(filename)
        payload = read_source(source, filename)

        type_key = _resource_type_key(resource_type)
        key = (type_key, filename)
        self._sequence += 1
        self._resources[key] = ResourceEntry(filename, payload, type_key, sequence=self._sequence)
        logger.debug("Registered resource %s (type=%s, %d bytes)", filename, type_key or "auto", len(payload))
        return self

    def add_resource_typed(
        self, filename: str, source: Source, resource_type: Union[ResourceType, str]
    ) -> "ProjectBuilder":
        """Register a resource with an explicit type."""
        return self.add_resource(filename, source, resource_type)

    # =========================================================================
    # Materialization
    # =========================================================================

    def as_objects(self) -> Project:
        """
        Materialize the accumulated inputs into an immutable Project.

        The first successful call caches the Project; later calls return it.
        A failed call leaves the builder accumulating.

        Raises:
            ValidationError: If no workflow is registered, the name override
                is blank, a resource type is unknown or properties are malformed
            ParseError: If the workflow document is invalid
        """
        if self._project is not None:
            return self._project

        if self._workflow is None:
            raise ValidationError("workflow is required")
        parsed = parse_workflow(self._workflow, source_name="workflow")

        base_name = parsed.name if self._name is None else self._name.strip()
        if not base_name:
            raise ValidationError("project name must be a non-empty string")

        properties_text: Optional[str] = None
        entries: Dict[str, str] = {}
        if self._properties is not None:
            properties_text = decode_text(self._properties, "properties")
            entries = parse_properties(properties_text)

        groups = group_resources(self._resources.values())
        names = derive_names(base_name, groups.keys())

        workflow = Workflow(
            name=base_name,
            namespace=self._namespace,
            document=freeze(parsed.document),
            source=parsed.source,
            annotations=freeze(names.annotations),
            labels=freeze({workflow_app_label(): base_name}),
        )

        properties = None
        if properties_text is not None:
            properties = PropertiesArtifact(
                name=names.properties_name,
                namespace=self._namespace,
                entries=freeze(entries),
                source=properties_text,
            )

        resources = tuple(
            ResourceGroup(
                name=names.group_names[resource_type],
                namespace=self._namespace,
                resource_type=resource_type,
                data=freeze(files),
            )
            for resource_type, files in groups.items()
        )

        self._project = Project(
            namespace=self._namespace,
            workflow=workflow,
            properties=properties,
            resources=resources,
        )
        logger.debug(
            "Materialized project %s: properties=%s, resource groups=%s",
            base_name,
            properties is not None,
            [g.name for g in resources],
        )
        return self._project

    materialize = as_objects

    def save_as_manifests(self, path: Union[str, Path]) -> List[Path]:
        """
        Write the project as one manifest file per entity into path.

        Materializes first (or reuses the cached Project). Files written
        before a failure are left in place.

        Returns:
            Written file paths.

        Raises:
            ProjectIOError: If a manifest cannot be written
        """
        project = self.as_objects()
        objects = project_to_manifests(project, self._config)
        return write_manifests(objects, path, self._config)

    serialize_to_directory = save_as_manifests


def new(namespace: str, config: Optional[BuilderConfig] = None) -> ProjectBuilder:
    """Create an empty builder for the given namespace."""
    return ProjectBuilder(namespace, config=config)
