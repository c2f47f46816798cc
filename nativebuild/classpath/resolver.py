import os
from pathlib import Path
from typing import Iterable, List

from nativebuild.build.layout import ApplicationLayout

# native-image always takes a colon separated classpath, whatever the host
CLASSPATH_SEPARATOR = ":"

SEPARATORS = "/" + os.sep if os.sep != "/" else "/"


def has_separator(entry: str) -> bool:
    return any(sep in entry for sep in SEPARATORS)


def _join(base: Path, entry: str) -> Path:
    # entries are always relative to base, even with a leading separator
    relative = entry.lstrip(SEPARATORS)
    return Path(os.path.normpath(os.path.join(str(base), relative)))


def resolve_entry(entry: str, layout: ApplicationLayout) -> Path:
    if has_separator(entry):
        return _join(layout.root, entry)
    return _join(layout.lib_dir, entry)


def resolve_classpath(
    entries: Iterable[str],
    layout: ApplicationLayout,
) -> List[Path]:
    classpath = [layout.root, layout.classes_dir]
    classpath.extend(resolve_entry(entry, layout) for entry in entries)
    return classpath


def join_classpath(paths: Iterable[Path]) -> str:
    return CLASSPATH_SEPARATOR.join(str(path) for path in paths)
