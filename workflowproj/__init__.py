"""
workflowproj - Assemble a workflow project and render it as Kubernetes manifests.

A project is one workflow document, optional application properties, and
any number of auxiliary resources (OpenAPI specs, schemas, ...). The
builder validates and names everything, then produces either an immutable
Project or a directory of manifests.

Usage:
    from workflowproj import new, ResourceType

    builder = (
        new("default")
        .with_workflow(Path("hello.sw.json"))
        .with_properties(Path("application.properties"))
        .add_resource("myopenapi.json", Path("specs/myopenapi.json"))
        .add_resource_typed("schema.json", Path("specs/schema.json"), ResourceType.GENERIC)
    )

    project = builder.as_objects()
    project.workflow.name                 # "hello"
    project.resources[0].name             # "hello-openapis"

    builder.save_as_manifests(Path("manifests"))
"""

__version__ = "0.1.0"

from .builder import ProjectBuilder, new
from .config import BuilderConfig, load_config
from .errors import (
    BuilderStateError,
    ParseError,
    ProjectError,
    ProjectIOError,
    ValidationError,
    ValidationIssue,
)
from .manifests import (
    ConfigMap,
    KubeObject,
    SonataFlow,
    decode_manifest,
    project_to_manifests,
)
from .metadata import ResourceType, get_resource_type_annotation
from .model import Project, PropertiesArtifact, ResourceGroup, Workflow
from .naming import ProjectNames, derive_names
from .properties import parse_properties
from .resources import classify_resource, group_resources
from .workflow import parse_workflow

__all__ = [
    "__version__",
    # Builder
    "ProjectBuilder",
    "new",
    # Config
    "BuilderConfig",
    "load_config",
    # Errors
    "ProjectError",
    "ParseError",
    "ValidationError",
    "BuilderStateError",
    "ProjectIOError",
    "ValidationIssue",
    # Model
    "Project",
    "Workflow",
    "PropertiesArtifact",
    "ResourceGroup",
    "ResourceType",
    # Components
    "parse_workflow",
    "parse_properties",
    "classify_resource",
    "group_resources",
    "derive_names",
    "ProjectNames",
    "get_resource_type_annotation",
    # Manifests
    "KubeObject",
    "ConfigMap",
    "SonataFlow",
    "project_to_manifests",
    "decode_manifest",
]
