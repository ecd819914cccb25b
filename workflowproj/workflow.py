"""
workflow.py - Parse and validate workflow documents.

A workflow document is JSON or YAML text following the Serverless Workflow
layout. Parsing is pure: the same bytes always produce the same result or
the same ParseError.

Validation runs in two passes:
1. Structure, checked against WORKFLOW_SCHEMA with jsonschema (Draft 7)
2. References between states (unique names, start state, transitions)

Usage:
    from workflowproj.workflow import parse_workflow

    parsed = parse_workflow(Path("hello.sw.json").read_bytes())
    print(parsed.name)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import yaml
from jsonschema import Draft7Validator

from .errors import ParseError, ValidationIssue

logger = logging.getLogger(__name__)

# Fields that identify the workflow rather than describe its behaviour.
IDENTITY_FIELDS = ("id", "key", "name", "description", "version", "annotations")

_NON_EMPTY_STRING = {"type": "string", "minLength": 1, "pattern": r"\S"}

WORKFLOW_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Serverless Workflow document",
    "type": "object",
    "required": ["specVersion", "states"],
    "anyOf": [{"required": ["id"]}, {"required": ["key"]}],
    "properties": {
        "id": _NON_EMPTY_STRING,
        "key": _NON_EMPTY_STRING,
        "name": {"type": "string"},
        "description": {"type": "string"},
        "version": {"type": ["string", "number"]},
        "specVersion": _NON_EMPTY_STRING,
        "annotations": {"type": "array", "items": {"type": "string"}},
        "start": {
            "oneOf": [
                _NON_EMPTY_STRING,
                {
                    "type": "object",
                    "required": ["stateName"],
                    "properties": {"stateName": _NON_EMPTY_STRING},
                },
            ]
        },
        "functions": {
            "oneOf": [
                {"type": "string"},
                {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["name", "operation"],
                        "properties": {
                            "name": _NON_EMPTY_STRING,
                            "operation": {"type": "string"},
                            "type": {"type": "string"},
                        },
                    },
                },
            ]
        },
        "events": {"type": ["string", "array"]},
        "states": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["name", "type"],
                "properties": {
                    "name": _NON_EMPTY_STRING,
                    "type": _NON_EMPTY_STRING,
                },
            },
        },
    },
}

_VALIDATOR = Draft7Validator(WORKFLOW_SCHEMA)


@dataclass(frozen=True)
class ParsedWorkflow:
    """A structurally valid workflow document."""

    name: str
    document: Dict[str, Any]
    source: str


# =============================================================================
# Internal Helpers
# =============================================================================


def _load_document(text: str, source_name: Optional[str]) -> Any:
    """Decode JSON (when the text looks like JSON) or YAML."""
    stripped = text.lstrip()
    if not stripped:
        raise ParseError("workflow document is empty", source_name=source_name)

    if stripped.startswith("{"):
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"invalid JSON: {e}", source_name=source_name) from e

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"invalid YAML: {e}", source_name=source_name) from e


def _key_issues(value: Any, path: str = "") -> List[ValidationIssue]:
    """Report mapping keys that are not strings (YAML reads `on:` as True)."""
    issues: List[ValidationIssue] = []
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                issues.append(
                    ValidationIssue(
                        path=path,
                        message=f"mapping key {key!r} must be a string; quote it",
                        value=key,
                    )
                )
                continue
            issues.extend(_key_issues(item, f"{path}.{key}" if path else key))
    elif isinstance(value, list):
        for idx, item in enumerate(value):
            issues.extend(_key_issues(item, f"{path}.{idx}" if path else str(idx)))
    return issues


def _schema_issues(document: Dict[str, Any]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for error in sorted(_VALIDATOR.iter_errors(document), key=lambda e: [str(p) for p in e.absolute_path]):
        path = ".".join(str(p) for p in error.absolute_path)
        message = error.message
        if error.validator == "anyOf" and not path:
            message = "workflow must declare a non-empty 'id'"
        issues.append(ValidationIssue(path=path, message=message, value=None))
    return issues


def _transition_target(transition: Any) -> Optional[str]:
    if isinstance(transition, str):
        return transition
    if isinstance(transition, dict):
        target = transition.get("nextState")
        return target if isinstance(target, str) else None
    return None


def _reference_issues(document: Dict[str, Any]) -> List[ValidationIssue]:
    """Check state names are unique and every referenced state exists."""
    issues: List[ValidationIssue] = []
    states = document["states"]

    names: List[str] = []
    for idx, state in enumerate(states):
        name = state["name"]
        if name in names:
            issues.append(
                ValidationIssue(path=f"states.{idx}.name", message=f"duplicate state name '{name}'")
            )
        names.append(name)

    # Without a start, execution begins at the first state.
    start = document.get("start")
    start_name = start["stateName"] if isinstance(start, dict) else start
    if start is not None and start_name not in names:
        issues.append(
            ValidationIssue(path="start", message=f"start state '{start_name}' is not defined")
        )

    for idx, state in enumerate(states):
        target = _transition_target(state.get("transition"))
        if target is not None and target not in names:
            issues.append(
                ValidationIssue(
                    path=f"states.{idx}.transition",
                    message=f"transition to undefined state '{target}'",
                )
            )
    return issues


# =============================================================================
# Public API
# =============================================================================


def workflow_identifier(document: Dict[str, Any]) -> str:
    """Return the declared identifier (``id``, falling back to ``key``)."""
    identifier = document.get("id") or document.get("key") or ""
    return str(identifier).strip()


def parse_workflow(raw: Union[bytes, str], source_name: Optional[str] = None) -> ParsedWorkflow:
    """
    Parse a workflow document and extract its identifier.

    Args:
        raw: Document content (UTF-8 bytes or text)
        source_name: Optional label for error messages

    Returns:
        ParsedWorkflow with the declared identifier as its name.

    Raises:
        ParseError: If the document is not well-formed or fails validation.
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"workflow is not UTF-8 text: {e}", source_name=source_name) from e
    else:
        text = raw

    document = _load_document(text, source_name)
    if not isinstance(document, dict):
        raise ParseError(
            f"workflow must be a mapping, got {type(document).__name__}",
            source_name=source_name,
        )

    issues = _key_issues(document)
    if issues:
        raise ParseError("invalid workflow", issues=issues, source_name=source_name)

    issues = _schema_issues(document)
    if issues:
        raise ParseError("invalid workflow", issues=issues, source_name=source_name)

    issues = _reference_issues(document)
    if issues:
        raise ParseError("invalid workflow", issues=issues, source_name=source_name)

    name = workflow_identifier(document)
    logger.debug("Parsed workflow %s (%d states)", name, len(document["states"]))
    return ParsedWorkflow(name=name, document=document, source=text)


def flow_definition(document: Dict[str, Any]) -> Dict[str, Any]:
    """Return the workflow body without its identity fields."""
    return {k: v for k, v in document.items() if k not in IDENTITY_FIELDS}
