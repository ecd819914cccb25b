"""
metadata.py - Annotation keys, labels and resource type enumeration.

Annotation and label keys live under the fixed ``sonataflow.org`` domain.
The resource type annotation is the only contract external
readers should rely on to associate a workflow with its resource groups:

    sonataflow.org/resource-openapis: hello-openapis
"""

from enum import Enum
from typing import Optional, Union

from .config import ANNOTATION_DOMAIN
from .errors import ValidationError


class ResourceType(str, Enum):
    """Semantic type of an auxiliary resource.

    The value doubles as the suffix of the resource group name.
    """

    OPENAPI = "openapis"
    GENERIC = "genericres"

    @classmethod
    def lookup(cls, value: Union["ResourceType", str]) -> Optional["ResourceType"]:
        """Resolve an enum member or its value or name (case-insensitive); None if unknown."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if lowered in (member.value, member.name.lower()):
                    return member
        return None

    @classmethod
    def parse(cls, value: Union["ResourceType", str]) -> "ResourceType":
        """Resolve like lookup(), raising ValidationError for unknown values."""
        member = cls.lookup(value)
        if member is not None:
            return member
        valid = ", ".join(m.value for m in cls)
        raise ValidationError(
            f"Unrecognized resource type: {value!r}. Must be one of: {valid}."
        )


def _key(name: str) -> str:
    return f"{ANNOTATION_DOMAIN}/{name}"


def get_resource_type_annotation(resource_type: ResourceType) -> str:
    """Annotation key placed on the workflow for a resource group of this type."""
    return _key(f"resource-{ResourceType.parse(resource_type).value}")


def description_annotation() -> str:
    return _key("description")


def version_annotation() -> str:
    return _key("version")


def profile_annotation() -> str:
    return _key("profile")


def workflow_app_label() -> str:
    """Label key tying a ConfigMap to the workflow it belongs to."""
    return _key("workflow-app")
