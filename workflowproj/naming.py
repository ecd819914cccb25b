"""
naming.py - Derived names and workflow cross-reference annotations.

Every name in a project is derived from a single base name:

    <base>-props        properties ConfigMap
    <base>-openapis     OpenAPI resource group
    <base>-genericres   generic resource group

For each resource type present, the workflow carries an annotation whose
value is the group name, e.g. ``sonataflow.org/resource-openapis:
hello-openapis``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable

from .errors import ValidationError
from .metadata import ResourceType, get_resource_type_annotation

logger = logging.getLogger(__name__)

PROPERTIES_SUFFIX = "props"


@dataclass(frozen=True)
class ProjectNames:
    """Names derived for one base name and one set of resource types."""

    base_name: str
    properties_name: str
    group_names: Dict[ResourceType, str]
    annotations: Dict[str, str]


def properties_name(base_name: str) -> str:
    return f"{base_name}-{PROPERTIES_SUFFIX}"


def resource_group_name(base_name: str, resource_type: ResourceType) -> str:
    return f"{base_name}-{ResourceType.parse(resource_type).value}"


def derive_names(base_name: str, resource_types: Iterable[ResourceType]) -> ProjectNames:
    """
    Compute every derived name and annotation for a project.

    The result depends only on the base name and the set of types: both
    mappings follow ResourceType declaration order, whatever order (or
    repetition) the types arrive in.

    Raises:
        ValidationError: If the base name is blank
    """
    if not base_name or not base_name.strip():
        raise ValidationError("base name must be a non-empty string")

    present = {ResourceType.parse(t) for t in resource_types}
    ordered = [t for t in ResourceType if t in present]

    group_names = {t: resource_group_name(base_name, t) for t in ordered}
    annotations = {
        get_resource_type_annotation(t): group_names[t] for t in ordered
    }

    logger.debug("Derived names for %s: %s", base_name, list(group_names.values()))
    return ProjectNames(
        base_name=base_name,
        properties_name=properties_name(base_name),
        group_names=group_names,
        annotations=annotations,
    )
