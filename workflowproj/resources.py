"""
resources.py - Classify auxiliary resources and group them by type.

Classification is a pure function of (filename, payload, explicit type).
Grouping folds classified entries into an ordered mapping keyed by type,
then by filename, so naming and serialization iterate deterministically.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict, Iterable, Optional, Union

import yaml

from .errors import ValidationError
from .metadata import ResourceType

logger = logging.getLogger(__name__)

STRUCTURED_EXTENSIONS = (".json", ".yaml", ".yml")
OPENAPI_MARKERS = ("openapi", "swagger")

# Kubernetes ConfigMap data key.
CONFIGMAP_KEY_PATTERN = re.compile(r"[-._a-zA-Z0-9]+")
CONFIGMAP_KEY_MAX_LENGTH = 253


@dataclass(frozen=True)
class ResourceEntry:
    """A registered resource payload awaiting classification."""

    filename: str
    payload: bytes
    resource_type: Optional[Union[ResourceType, str]] = None
    # Registration order; among entries for the same file the highest wins.
    sequence: int = 0


def _load_structured(filename: str, payload: bytes) -> Any:
    """Best-effort decode of a JSON/YAML payload; None when it does not parse."""
    try:
        text = payload.decode("utf-8-sig")
    except UnicodeDecodeError:
        return None

    try:
        if filename.lower().endswith(".json"):
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError):
        return None


def is_openapi_document(filename: str, payload: bytes) -> bool:
    """True when the payload is a JSON/YAML mapping with an openapi/swagger key."""
    if PurePosixPath(filename).suffix.lower() not in STRUCTURED_EXTENSIONS:
        return False
    document = _load_structured(filename, payload)
    if not isinstance(document, dict):
        return False
    return any(marker in document for marker in OPENAPI_MARKERS)


def classify_resource(
    filename: str,
    payload: bytes,
    resource_type: Optional[Union[ResourceType, str]] = None,
) -> ResourceType:
    """
    Assign a semantic type to a resource.

    Args:
        filename: Original file name (used for extension sniffing)
        payload: Raw resource bytes
        resource_type: Explicit type; inferred from the content when None

    Returns:
        The resource type.

    Raises:
        ValidationError: If an explicit type is not recognized
    """
    if resource_type is not None:
        return ResourceType.parse(resource_type)
    if is_openapi_document(filename, payload):
        return ResourceType.OPENAPI
    return ResourceType.GENERIC


def validate_filename(filename: str) -> str:
    """Reject names that cannot be used as ConfigMap data keys."""
    if not isinstance(filename, str) or not filename.strip():
        raise ValidationError("resource filename must be a non-empty string")
    if "/" in filename or "\\" in filename or filename in (".", ".."):
        raise ValidationError(f"resource filename must not contain a path: '{filename}'")
    if len(filename) > CONFIGMAP_KEY_MAX_LENGTH or not CONFIGMAP_KEY_PATTERN.fullmatch(filename):
        raise ValidationError(
            f"resource filename '{filename}' is not a valid ConfigMap key "
            f"(at most {CONFIGMAP_KEY_MAX_LENGTH} characters from [-._a-zA-Z0-9])"
        )
    return filename


def group_resources(entries: Iterable[ResourceEntry]) -> Dict[ResourceType, Dict[str, bytes]]:
    """
    Classify entries and fold them into per-type groups.

    Groups are ordered by first-seen type and files by first-seen filename.
    A repeated filename within a type keeps its first position and takes the
    payload of the entry with the highest sequence (ties: the later entry).
    The same filename under two different types lands in both groups.
    """
    classified = [
        (classify_resource(entry.filename, entry.payload, entry.resource_type), entry)
        for entry in entries
    ]

    groups: Dict[ResourceType, Dict[str, bytes]] = {}
    for resource_type, entry in classified:
        groups.setdefault(resource_type, {}).setdefault(entry.filename, entry.payload)
    for resource_type, entry in sorted(classified, key=lambda item: item[1].sequence):
        groups[resource_type][entry.filename] = entry.payload

    for resource_type, files in groups.items():
        logger.debug("Grouped %d %s resource(s): %s", len(files), resource_type.value, list(files))
    return groups
