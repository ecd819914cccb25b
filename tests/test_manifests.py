"""
Test suite for manifest conversion and decoding (workflowproj/manifests.py).

Round-trip checks decode written files with yaml.safe_load and
decode_manifest and assert every object is typed and versioned.
"""

import base64

import pytest
import yaml

from workflowproj import (
    ConfigMap,
    ParseError,
    ResourceType,
    SonataFlow,
    decode_manifest,
    new,
    project_to_manifests,
)
from workflowproj.config import BuilderConfig
from workflowproj.manifests import dump_manifest, manifest_filename


@pytest.fixture
def project(workflow_minimal, workflow_properties, spec_openapi):
    return (
        new("sonataflow-ns")
        .with_workflow(workflow_minimal)
        .with_properties(workflow_properties)
        .add_resource("myopenapi.json", spec_openapi)
        .add_resource_typed("logo.png", b"\x89PNG\r\n\x1a\n\xff", ResourceType.GENERIC)
        .as_objects()
    )


class TestConversion:
    """Tests for project_to_manifests."""

    def test_kinds_and_order(self, project):
        objects = project_to_manifests(project)
        assert [type(o) for o in objects] == [SonataFlow, ConfigMap, ConfigMap, ConfigMap]
        assert [o.metadata.name for o in objects] == [
            "hello",
            "hello-props",
            "hello-openapis",
            "hello-genericres",
        ]
        assert all(o.metadata.namespace == "sonataflow-ns" for o in objects)

    def test_workflow_annotations(self, project):
        flow = project_to_manifests(project)[0]
        annotations = flow.metadata.annotations
        assert flow.apiVersion == "sonataflow.org/v1alpha08"
        assert annotations["sonataflow.org/description"] == "Description"
        assert annotations["sonataflow.org/version"] == "1.0"
        assert annotations["sonataflow.org/profile"] == "dev"
        assert annotations["sonataflow.org/resource-openapis"] == "hello-openapis"
        assert annotations["sonataflow.org/resource-genericres"] == "hello-genericres"

    def test_flow_spec(self, project):
        flow = project_to_manifests(project)[0]
        assert "id" not in flow.spec.flow
        assert flow.spec.flow["start"] == "HelloWorld"
        assert flow.spec.flow["states"][0]["type"] == "inject"

    def test_properties_configmap(self, project):
        props = project_to_manifests(project)[1]
        assert list(props.data) == ["application.properties"]
        assert props.data["application.properties"] == project.properties.source
        assert props.metadata.labels == {"sonataflow.org/workflow-app": "hello"}

    def test_binary_payload(self, project):
        generic = project_to_manifests(project)[3]
        assert generic.data == {}
        assert base64.b64decode(generic.binaryData["logo.png"]) == b"\x89PNG\r\n\x1a\n\xff"

    def test_custom_config(self, project):
        config = BuilderConfig(api_version="sonataflow.org/v1alpha09", profile="prod")
        flow = project_to_manifests(project, config)[0]
        assert flow.apiVersion == "sonataflow.org/v1alpha09"
        assert flow.metadata.annotations["sonataflow.org/profile"] == "prod"


class TestEncoding:
    """Tests for dump_manifest, manifest_filename and decode_manifest."""

    def test_round_trip(self, project):
        for obj in project_to_manifests(project):
            decoded = decode_manifest(dump_manifest(obj))
            assert type(decoded) is type(obj)
            assert decoded == obj

    def test_dump_omits_empty_binary_data(self, project):
        props = project_to_manifests(project)[1]
        assert "binaryData" not in yaml.safe_load(dump_manifest(props))

    def test_filename(self, project):
        objects = project_to_manifests(project)
        assert manifest_filename(objects[0], 1) == "01-sonataflow_hello.yaml"
        assert manifest_filename(objects[2], 3, ".yml") == "03-configmap_hello-openapis.yml"

    def test_written_files_decode(self, tmp_path, workflow_minimal, spec_openapi):
        paths = (
            new("default")
            .with_workflow(workflow_minimal)
            .add_resource("myopenapi.json", spec_openapi)
            .save_as_manifests(tmp_path)
        )
        for path in paths:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
            assert raw["apiVersion"]
            assert raw["kind"]
            assert decode_manifest(path.read_bytes()).kind == raw["kind"]


class TestDecodeErrors:
    """Tests for decode_manifest failures."""

    def test_not_yaml(self):
        with pytest.raises(ParseError):
            decode_manifest("kind: [unclosed")

    def test_not_mapping(self):
        with pytest.raises(ParseError, match="mapping"):
            decode_manifest("- a\n- b\n")

    def test_untyped(self):
        with pytest.raises(ParseError, match="not typed"):
            decode_manifest("metadata:\n  name: x\n")

    def test_unknown_kind(self):
        with pytest.raises(ParseError, match="unknown manifest kind 'Deployment'"):
            decode_manifest("apiVersion: apps/v1\nkind: Deployment\nmetadata:\n  name: x\n")

    def test_invalid_shape(self):
        with pytest.raises(ParseError, match="invalid SonataFlow manifest") as exc_info:
            decode_manifest("apiVersion: sonataflow.org/v1alpha08\nkind: SonataFlow\nmetadata:\n  name: x\n")
        assert any(issue.path == "spec" for issue in exc_info.value.issues)
