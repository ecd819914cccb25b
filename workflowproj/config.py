"""
Configuration handling for the project builder.

The builder has no environment-driven settings. BuilderConfig collects the
presentation settings used when a project is serialized (workflow apiVersion,
profile annotation value, manifest file extension) so they can be set from a
dict or a YAML file.

The annotation domain is not configurable: every annotation and label key,
including the resource cross-reference key, lives under ANNOTATION_DOMAIN.

Example YAML configuration:
    api_version: sonataflow.org/v1alpha08
    profile: dev
    manifest_extension: .yaml

Example usage:
    from workflowproj.config import load_config

    config = load_config(Path("workflowproj.yaml"))
    builder = new("default", config=config)
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .errors import ProjectIOError, ValidationError

ANNOTATION_DOMAIN = "sonataflow.org"
DEFAULT_API_VERSION = f"{ANNOTATION_DOMAIN}/v1alpha08"
DEFAULT_PROFILE = "dev"
DEFAULT_MANIFEST_EXTENSION = ".yaml"
DEFAULT_PROPERTIES_KEY = "application.properties"


@dataclass(frozen=True)
class BuilderConfig:
    """
    Settings applied when a project is serialized.

    Attributes:
        api_version: apiVersion of the workflow custom resource
        profile: Value of the profile annotation on the workflow
        manifest_extension: File extension of written manifests
        properties_key: Data key holding the properties text
    """

    api_version: str = DEFAULT_API_VERSION
    profile: str = DEFAULT_PROFILE
    manifest_extension: str = DEFAULT_MANIFEST_EXTENSION
    properties_key: str = DEFAULT_PROPERTIES_KEY

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuilderConfig":
        """
        Create a BuilderConfig from a dictionary.

        Raises:
            ValidationError: On unknown keys or blank values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValidationError(f"Unknown config keys: {', '.join(unknown)}")

        for key, value in data.items():
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"Config key '{key}' must be a non-empty string")

        extension = data.get("manifest_extension")
        if extension is not None and not extension.startswith("."):
            data = dict(data, manifest_extension=f".{extension}")

        return cls(**data)


def load_config(config: Union[Path, str, Dict[str, Any]]) -> BuilderConfig:
    """
    Load builder configuration from a YAML file or a dict.

    Args:
        config: Path to a YAML file, or a dict of settings

    Returns:
        BuilderConfig

    Raises:
        ProjectIOError: If the file cannot be read
        ValidationError: If the content is not a valid configuration
    """
    if isinstance(config, dict):
        return BuilderConfig.from_dict(config)

    path = Path(config)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ProjectIOError(f"Cannot read config file: {e}", path) from e
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return BuilderConfig()
    if not isinstance(data, dict):
        raise ValidationError(f"Config file {path} must contain a mapping")
    return BuilderConfig.from_dict(data)
