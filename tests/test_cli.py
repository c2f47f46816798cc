"""
Tests for the nativebuild command line.
"""

import json
from unittest.mock import patch

from typer.testing import CliRunner

from conftest import RecordingExecutor
from nativebuild.cli import app

runner = CliRunner()

MANIFEST = """Manifest-Version: 1.0
Start-Class: test-start-class
Spring-Boot-Classes: BOOT-INF/classes/
Spring-Boot-Lib: BOOT-INF/lib/
Spring-Boot-Classpath-Index: BOOT-INF/classpath.idx
"""


def write_manifest(app_root):
    (app_root / "META-INF").mkdir()
    (app_root / "META-INF" / "MANIFEST.MF").write_text(MANIFEST)


class TestClasspathCommand:
    def test_prints_classpath(self, app_root, write_index):
        write_manifest(app_root)
        write_index('- "spring-native-0.8.6-xxxxxx.jar"\n')

        result = runner.invoke(app, ["classpath", "--application", str(app_root)])

        assert result.exit_code == 0
        assert result.stdout.strip() == ":".join([
            str(app_root),
            str(app_root / "BOOT-INF" / "classes"),
            str(app_root / "BOOT-INF" / "lib" / "spring-native-0.8.6-xxxxxx.jar"),
        ])

    def test_without_native_support(self, app_root, write_index):
        write_manifest(app_root)
        write_index('- "test-jar.jar"\n')

        result = runner.invoke(app, ["classpath", "--application", str(app_root)])

        assert result.exit_code == 2

    def test_missing_manifest(self, app_root):
        result = runner.invoke(app, ["classpath", "--application", str(app_root)])

        assert result.exit_code == 12


class TestBuildCommand:
    def test_builds_and_persists_layer(self, app_root, write_index, tmp_path, monkeypatch):
        monkeypatch.delenv("BP_NATIVE_IMAGE_BUILD_ARGUMENTS", raising=False)
        monkeypatch.delenv("BP_BOOT_NATIVE_IMAGE_BUILD_ARGUMENTS", raising=False)
        monkeypatch.delenv("BP_NATIVE_IMAGE_TIMEOUT", raising=False)
        monkeypatch.setenv("CNB_STACK_ID", "io.paketo.stacks.tiny")
        write_manifest(app_root)
        write_index('- "test-jar.jar"\n- "spring-native-0.8.6-xxxxxx.jar"\n')
        executor = RecordingExecutor()
        layers_root = tmp_path / "layers"

        with patch("nativebuild.build.orchestrator.SubprocessExecutor", return_value=executor):
            result = runner.invoke(
                app,
                [
                    "build",
                    "--application", str(app_root),
                    "--layers", str(layers_root),
                    "--args", "--no-fallback",
                ],
            )

        assert result.exit_code == 0, result.output
        assert "Build complete!" in result.stdout
        assert [p.name for p in app_root.iterdir()] == ["test-start-class"]

        args = executor.calls[1].args
        assert args[0] == "--no-fallback"
        assert args[1] == "-H:+StaticExecutableWithDynamicLibC"

        persisted = json.loads((layers_root / "native-image.json").read_text())
        assert persisted["cache"] is True
        assert persisted["metadata"]["stack-id"] == "io.paketo.stacks.tiny"

    def test_fails_without_native_support(self, app_root, write_index, tmp_path):
        write_manifest(app_root)
        write_index('- "test-jar.jar"\n')
        executor = RecordingExecutor()

        with patch("nativebuild.build.orchestrator.SubprocessExecutor", return_value=executor):
            result = runner.invoke(
                app,
                ["build", "--application", str(app_root), "--layers", str(tmp_path / "layers")],
            )

        assert result.exit_code == 2
        assert executor.calls == []
        assert (app_root / "fixture-marker").exists()
