import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from nativebuild.errors import ConfigError
from nativebuild.utils.fs import FilesystemError, atomic_write, ensure_dir


@dataclass
class Layer:
    name: str
    path: Path
    build: bool = False
    cache: bool = False
    launch: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "build": self.build,
            "cache": self.cache,
            "launch": self.launch,
            "metadata": self.metadata,
        }


class Layers:
    """Allocates layer directories under a layers root and records their flags."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def layer(self, name: str) -> Layer:
        if not name or "/" in name or "\\" in name:
            raise ConfigError(f"Invalid layer name: {name!r}")

        path = self.root / name
        ensure_dir(path)

        layer = Layer(name=name, path=path.resolve())
        metadata_file = self.metadata_path(name)
        if metadata_file.exists():
            layer.metadata = self._load_metadata(metadata_file)
        return layer

    def metadata_path(self, name: str) -> Path:
        return self.root / f"{name}.json"

    def persist(self, layer: Layer) -> Path:
        path = self.metadata_path(layer.name)
        payload = json.dumps(layer.to_dict(), indent=2, sort_keys=True)
        atomic_write(path, payload.encode("utf-8"))
        return path

    def _load_metadata(self, path: Path) -> Dict[str, Any]:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FilesystemError(
                f"Failed to read layer metadata: {path}"
            ) from exc

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ConfigError(
                f"Invalid layer metadata: {path}"
            ) from exc

        if not isinstance(data, dict):
            raise ConfigError(f"Invalid layer metadata: {path}")
        return dict(data.get("metadata") or {})
