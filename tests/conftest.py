"""
Pytest configuration and fixtures for nativebuild tests.
"""

from pathlib import Path

import pytest

from nativebuild.build.layers import Layers
from nativebuild.manifest import ManifestProperties
from nativebuild.utils.subprocess import ExecutionResult

START_CLASS = "test-start-class"


class RecordingExecutor:
    """Executor double: records every call and fakes native-image output."""

    def __init__(self, *, version: str = "GraalVM 21.0.0 Java 11 CE", write_output: bool = True):
        self.calls = []
        self.version = version
        self.write_output = write_output

    def execute(self, execution, *, cancel_event=None, timeout=None):
        self.calls.append(execution)

        if "--version" in execution.args:
            return ExecutionResult(returncode=0, stdout=self.version + "\n")

        if self.write_output:
            (Path(execution.dir) / START_CLASS).write_bytes(b"\x7fELF")
        return ExecutionResult(returncode=0)


@pytest.fixture
def app_root(tmp_path):
    """Exploded application with a marker file and an empty BOOT-INF."""
    root = tmp_path / "application"
    (root / "BOOT-INF" / "classes").mkdir(parents=True)
    (root / "BOOT-INF" / "lib").mkdir()
    (root / "fixture-marker").write_bytes(b"")
    return root.resolve()


@pytest.fixture
def write_index(app_root):
    def _write(content: str) -> Path:
        path = app_root / "BOOT-INF" / "classpath.idx"
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def manifest_values():
    return {
        "Start-Class": START_CLASS,
        "Spring-Boot-Classes": "BOOT-INF/classes/",
        "Spring-Boot-Classpath-Index": "BOOT-INF/classpath.idx",
        "Spring-Boot-Lib": "BOOT-INF/lib/",
    }


@pytest.fixture
def manifest(manifest_values):
    return ManifestProperties.from_mapping(manifest_values)


@pytest.fixture
def layers(tmp_path):
    return Layers(tmp_path / "layers")


@pytest.fixture
def layer(layers):
    return layers.layer("test-layer")


@pytest.fixture
def executor():
    return RecordingExecutor()
