import os
from dataclasses import dataclass
from pathlib import Path

from nativebuild.manifest import ManifestProperties
from nativebuild.utils.fs import FilesystemError


@dataclass(frozen=True)
class ApplicationLayout:
    root: Path
    classes_relative: Path
    lib_relative: Path
    classpath_index_relative: Path

    @classmethod
    def create(cls, root: Path, manifest: ManifestProperties) -> "ApplicationLayout":
        root = Path(root)
        if not root.exists():
            raise FilesystemError(f"Application root does not exist: {root}")
        if not root.is_dir():
            raise FilesystemError(f"Application root is not a directory: {root}")
        if not os.access(root, os.R_OK | os.X_OK):
            raise FilesystemError(f"Application root is not readable: {root}")

        return cls(
            root=root.resolve(),
            classes_relative=Path(manifest.classes),
            lib_relative=Path(manifest.lib),
            classpath_index_relative=Path(manifest.classpath_index),
        )

    @property
    def classes_dir(self) -> Path:
        return self.root / self.classes_relative

    @property
    def lib_dir(self) -> Path:
        return self.root / self.lib_relative

    @property
    def classpath_index(self) -> Path:
        return self.root / self.classpath_index_relative
