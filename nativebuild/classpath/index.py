from pathlib import Path
from typing import List

import yaml

from nativebuild.errors import IndexParseError
from nativebuild.utils.fs import FilesystemError


def read_classpath_index(root: Path, index_path: Path | str) -> List[str]:
    path = Path(root) / index_path

    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FilesystemError(
            f"Classpath index not found: {path}"
        ) from exc
    except OSError as exc:
        raise FilesystemError(
            f"Failed to read classpath index: {path}"
        ) from exc

    return parse_classpath_index(content, source=str(path))


def parse_classpath_index(content: str, *, source: str = "<string>") -> List[str]:
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise IndexParseError(
            f"Classpath index is not valid YAML: {source}"
        ) from exc

    if document is None:
        return []

    if not isinstance(document, list):
        raise IndexParseError(
            f"Classpath index must be a list of entries: {source}"
        )

    entries: List[str] = []
    for position, entry in enumerate(document):
        if not isinstance(entry, str):
            raise IndexParseError(
                f"Classpath index entry {position} is not a string "
                f"({entry!r}): {source}"
            )
        entries.append(entry)

    return entries
