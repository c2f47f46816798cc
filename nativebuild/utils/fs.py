import os
import shutil
from pathlib import Path

from nativebuild.errors import NativeBuildError


class FilesystemError(NativeBuildError):
    exit_code = 12

def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(
            f"Failed to create directory: {path}"
        ) from exc


def remove_path(path: Path) -> None:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
    except OSError as exc:
        raise FilesystemError(
            f"Failed to remove: {path}"
        ) from exc

def atomic_write(path: Path, data: bytes) -> None:
    tmp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        with tmp_path.open("wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except OSError as exc:
        raise FilesystemError(
            f"Failed to write file atomically: {path}"
        ) from exc
