"""Shared fixtures for workflowproj tests."""

from pathlib import Path

import pytest

TESTDATA_DIR = Path(__file__).parent / "testdata" / "workflows"
SPECS_DIR = TESTDATA_DIR / "specs"


@pytest.fixture
def workflow_minimal() -> Path:
    return TESTDATA_DIR / "workflow-minimal.sw.json"


@pytest.fixture
def workflow_minimal_invalid() -> Path:
    return TESTDATA_DIR / "workflow-minimal-invalid.sw.json"


@pytest.fixture
def workflow_service() -> Path:
    return TESTDATA_DIR / "workflow-service.sw.json"


@pytest.fixture
def workflow_yaml() -> Path:
    return TESTDATA_DIR / "workflow-greeting.sw.yaml"


@pytest.fixture
def workflow_properties() -> Path:
    return TESTDATA_DIR / "application.properties"


@pytest.fixture
def spec_openapi() -> Path:
    return SPECS_DIR / "workflow-service-openapi.json"


@pytest.fixture
def spec_generic() -> Path:
    return SPECS_DIR / "workflow-service-schema.json"
