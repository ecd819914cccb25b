"""
manifests.py - Kubernetes manifest model and on-disk serialization.

Project entities are converted into typed pydantic models (SonataFlow for
the workflow, ConfigMap for properties and resource groups) and written as
one YAML document per file:

    01-sonataflow_hello.yaml
    02-configmap_hello-props.yaml
    03-configmap_hello-openapis.yaml

decode_manifest() is the inverse: it turns a written file back into the
typed model for its kind.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .config import BuilderConfig
from .errors import ParseError, ProjectIOError, ValidationIssue
from .metadata import (
    description_annotation,
    profile_annotation,
    version_annotation,
    workflow_app_label,
)
from .model import Project, PropertiesArtifact, ResourceGroup, Workflow
from .workflow import flow_definition

logger = logging.getLogger(__name__)

CONFIGMAP_API_VERSION = "v1"


# =============================================================================
# Object Model
# =============================================================================


class ObjectMeta(BaseModel):
    """Subset of Kubernetes ObjectMeta used by the manifests."""

    name: str = Field(..., min_length=1)
    namespace: Optional[str] = None
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)


class KubeObject(BaseModel):
    """A versioned, typed manifest document."""

    apiVersion: str = Field(..., min_length=1)
    kind: str = Field(..., min_length=1)
    metadata: ObjectMeta

    def group_version_kind(self) -> str:
        return f"{self.apiVersion}, Kind={self.kind}"


class ConfigMap(KubeObject):
    apiVersion: str = CONFIGMAP_API_VERSION
    kind: str = "ConfigMap"
    data: Dict[str, str] = Field(default_factory=dict)
    binaryData: Dict[str, str] = Field(default_factory=dict)


class SonataFlowSpec(BaseModel):
    flow: Dict[str, Any]


class SonataFlow(KubeObject):
    kind: str = "SonataFlow"
    spec: SonataFlowSpec


# Kind -> model used by decode_manifest
MANIFEST_KINDS: Dict[str, Type[KubeObject]] = {
    "ConfigMap": ConfigMap,
    "SonataFlow": SonataFlow,
}


# =============================================================================
# Entity Conversion
# =============================================================================


def workflow_to_manifest(workflow: Workflow, config: Optional[BuilderConfig] = None) -> SonataFlow:
    """Build the SonataFlow custom resource for a workflow."""
    config = config or BuilderConfig()
    annotations: Dict[str, str] = {profile_annotation(): config.profile}
    if workflow.description:
        annotations[description_annotation()] = workflow.description
    if workflow.version:
        annotations[version_annotation()] = workflow.version
    annotations.update(workflow.annotations)

    return SonataFlow(
        apiVersion=config.api_version,
        metadata=ObjectMeta(
            name=workflow.name,
            namespace=workflow.namespace or None,
            labels=dict(workflow.labels),
            annotations=annotations,
        ),
        spec=SonataFlowSpec(flow=flow_definition(dict(workflow.document))),
    )


def properties_to_manifest(
    properties: PropertiesArtifact, workflow_name: str, config: Optional[BuilderConfig] = None
) -> ConfigMap:
    """Build the ConfigMap holding application properties."""
    config = config or BuilderConfig()
    return ConfigMap(
        metadata=ObjectMeta(
            name=properties.name,
            namespace=properties.namespace or None,
            labels={workflow_app_label(): workflow_name},
        ),
        data={config.properties_key: properties.source},
    )


def resource_group_to_manifest(group: ResourceGroup, workflow_name: str) -> ConfigMap:
    """Build the ConfigMap for a resource group; non-UTF-8 payloads go to binaryData."""
    data: Dict[str, str] = {}
    binary: Dict[str, str] = {}
    for filename, payload in group.data.items():
        try:
            data[filename] = payload.decode("utf-8")
        except UnicodeDecodeError:
            binary[filename] = base64.b64encode(payload).decode("ascii")

    return ConfigMap(
        metadata=ObjectMeta(
            name=group.name,
            namespace=group.namespace or None,
            labels={workflow_app_label(): workflow_name},
        ),
        data=data,
        binaryData=binary,
    )


def project_to_manifests(project: Project, config: Optional[BuilderConfig] = None) -> List[KubeObject]:
    """Convert every project entity, workflow first."""
    workflow_name = project.workflow.name
    objects: List[KubeObject] = [workflow_to_manifest(project.workflow, config)]
    if project.properties is not None:
        objects.append(properties_to_manifest(project.properties, workflow_name, config))
    for group in project.resources:
        objects.append(resource_group_to_manifest(group, workflow_name))
    return objects


# =============================================================================
# Encoding
# =============================================================================


def dump_manifest(obj: KubeObject) -> str:
    """Serialize a manifest model to a YAML document."""
    data = obj.model_dump(mode="json", exclude_none=True)
    if not data.get("binaryData"):
        data.pop("binaryData", None)
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)


def manifest_filename(obj: KubeObject, index: int, extension: str = ".yaml") -> str:
    """File name for the index-th manifest (1-based)."""
    return f"{index:02d}-{obj.kind.lower()}_{obj.metadata.name}{extension}"


def write_manifests(
    objects: List[KubeObject], out_dir: Union[str, Path], config: Optional[BuilderConfig] = None
) -> List[Path]:
    """
    Write one file per manifest into out_dir.

    Files already written stay on disk if a later write fails.

    Returns:
        Written file paths, in write order.

    Raises:
        ProjectIOError: If the directory cannot be created or a write fails
    """
    config = config or BuilderConfig()
    out_dir = Path(out_dir)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ProjectIOError(f"Cannot create output directory: {e}", out_dir) from e

    written: List[Path] = []
    for index, obj in enumerate(objects, start=1):
        path = out_dir / manifest_filename(obj, index, config.manifest_extension)
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(dump_manifest(obj))
        except OSError as e:
            raise ProjectIOError(f"Cannot write manifest: {e}", path) from e
        logger.debug("Wrote %s %s to %s", obj.kind, obj.metadata.name, path)
        written.append(path)

    logger.info("Wrote %d manifest(s) to %s", len(written), out_dir)
    return written


def decode_manifest(content: Union[str, bytes]) -> KubeObject:
    """
    Decode a manifest document into its typed model.

    Raises:
        ParseError: If the document is not YAML, lacks apiVersion/kind,
            names an unknown kind, or does not match the model
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ParseError(f"invalid manifest YAML: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("manifest must be a mapping")
    for key in ("apiVersion", "kind"):
        if not data.get(key):
            raise ParseError("manifest is not typed", issues=[ValidationIssue(key, "missing")])

    model = MANIFEST_KINDS.get(data["kind"])
    if model is None:
        raise ParseError(f"unknown manifest kind '{data['kind']}'")

    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        issues = [
            ValidationIssue(path=".".join(str(p) for p in err["loc"]), message=err["msg"])
            for err in e.errors()
        ]
        raise ParseError(f"invalid {data['kind']} manifest", issues=issues) from e
