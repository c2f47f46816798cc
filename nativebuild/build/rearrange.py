import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Tuple

from nativebuild.utils.fs import FilesystemError, remove_path

logger = logging.getLogger(__name__)

STAGING_SUFFIX = ".nativebuild-staging"
BACKUP_PREFIX = ".nativebuild-backup-"


def replace_application(root: Path, executable: Path) -> Path:
    """Leave ``root`` holding only a copy of ``executable``.

    Every pre-existing entry of ``root`` is moved aside before the copy is
    renamed into place, so a failure up to that rename puts the moved
    entries back and the application root is left as it was.
    """
    root = Path(root)
    executable = Path(executable)
    target = root / executable.name

    if not executable.is_file():
        raise FilesystemError(f"Executable not found: {executable}")

    staged = root / f".{executable.name}{STAGING_SUFFIX}"
    try:
        shutil.copy2(executable, staged)
    except OSError as exc:
        _discard(staged)
        raise FilesystemError(
            f"Failed to copy executable into application root: {root}"
        ) from exc

    try:
        backup = Path(tempfile.mkdtemp(prefix=BACKUP_PREFIX, dir=root))
    except OSError as exc:
        _discard(staged)
        raise FilesystemError(
            f"Failed to create backup directory in: {root}"
        ) from exc

    moved: List[Tuple[Path, Path]] = []
    try:
        for entry in sorted(root.iterdir()):
            if entry in (staged, backup):
                continue
            destination = backup / entry.name
            os.replace(entry, destination)
            moved.append((entry, destination))

        os.replace(staged, target)
    except OSError as exc:
        unrestored = _restore(moved)
        _discard(staged)
        if unrestored:
            raise FilesystemError(
                f"Failed to replace application contents in: {root}; "
                f"{len(unrestored)} entries could not be restored and remain in {backup}"
            ) from exc
        _discard(backup)
        raise FilesystemError(
            f"Failed to replace application contents in: {root}"
        ) from exc

    logger.debug("Removing %d previous application entries", len(moved))
    remove_path(backup)
    return target


def _restore(moved: List[Tuple[Path, Path]]) -> List[Path]:
    unrestored: List[Path] = []
    for original, destination in reversed(moved):
        try:
            os.replace(destination, original)
        except OSError:
            logger.error("Failed to restore %s from %s", original, destination)
            unrestored.append(original)
    return unrestored


def _discard(path: Path) -> None:
    try:
        remove_path(path)
    except FilesystemError:
        logger.warning("Failed to clean up %s", path)
