import hashlib
import logging
import threading
from pathlib import Path
from typing import List, Optional

from nativebuild.build.layers import Layer
from nativebuild.build.layout import ApplicationLayout
from nativebuild.build.rearrange import replace_application
from nativebuild.classpath.classifier import find_native_support
from nativebuild.classpath.index import read_classpath_index
from nativebuild.classpath.resolver import join_classpath, resolve_classpath
from nativebuild.compiler.invocation import build_invocation, version_invocation
from nativebuild.errors import CompilationError, ConfigError
from nativebuild.manifest import ManifestProperties
from nativebuild.stack import StackID
from nativebuild.utils.subprocess import (
    Execution,
    ExecutionResult,
    Executor,
    SubprocessError,
    SubprocessExecutor,
)

logger = logging.getLogger(__name__)


class NativeImage:
    """Compiles an exploded Spring Boot application with native-image.

    Everything the build depends on is passed to the constructor and held
    read-only; ``contribute`` may be called once per layer.
    """

    def __init__(
        self,
        application_root: Path,
        arguments: str,
        manifest: ManifestProperties,
        stack_id: StackID = StackID.BIONIC,
        *,
        executor: Optional[Executor] = None,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self._layout = ApplicationLayout.create(application_root, manifest)
        self._arguments = arguments
        self._manifest = manifest
        self._stack_id = StackID.parse(stack_id)
        self._executor = executor or SubprocessExecutor()
        self._timeout = timeout
        self._cancel_event = cancel_event

    @property
    def layout(self) -> ApplicationLayout:
        return self._layout

    @property
    def start_class(self) -> str:
        return self._manifest.start_class

    def classpath(self) -> List[Path]:
        """Read the classpath index and resolve it, failing without native support."""
        entries = read_classpath_index(
            self._layout.root,
            self._layout.classpath_index_relative,
        )
        logger.debug("Read %d classpath index entries", len(entries))

        native_support = find_native_support(entries)
        if native_support is None:
            raise ConfigError(
                "No spring-native or spring-graalvm-native dependency found in "
                f"{self._layout.classpath_index}; the application cannot be "
                "compiled to a native image"
            )
        logger.info("Found native support library: %s", native_support)

        return resolve_classpath(entries, self._layout)

    def contribute(self, layer: Layer) -> Layer:
        classpath = join_classpath(self.classpath())

        invocation = build_invocation(
            arguments=self._arguments,
            stack_id=self._stack_id,
            layer_path=layer.path,
            start_class=self.start_class,
            classpath=classpath,
        )

        version = self._run(version_invocation(layer.path)).stdout.strip()
        logger.info("Using %s", version or "native-image (unknown version)")

        logger.info("Compiling %s", self.start_class)
        self._run(invocation)

        executable = Path(layer.path) / self.start_class
        if not executable.is_file():
            raise CompilationError(
                f"native-image did not produce the expected executable: {executable}"
            )

        replace_application(self._layout.root, executable)
        logger.info("Replaced application contents with %s", executable.name)

        layer.metadata = {
            "native-image": version,
            "arguments": list(invocation.args),
            "stack-id": self._stack_id.value,
            "classpath-sha256": hashlib.sha256(classpath.encode("utf-8")).hexdigest(),
        }
        layer.cache = True
        return layer

    def _run(self, execution: Execution) -> ExecutionResult:
        try:
            result = self._executor.execute(
                execution,
                cancel_event=self._cancel_event,
                timeout=self._timeout,
            )
        except SubprocessError as exc:
            raise CompilationError(
                f"native-image failed: {exc}",
                returncode=exc.returncode,
                stdout=exc.stdout,
                stderr=exc.stderr,
            ) from exc

        if result.returncode != 0:
            raise CompilationError(
                f"native-image exited with status {result.returncode}",
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result
