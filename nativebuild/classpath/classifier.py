import os
import re
from typing import Iterable, Optional

NATIVE_SUPPORT_PATTERN = re.compile(r"^spring-(graalvm-)?native-.+\.jar$")


def entry_name(entry: str) -> str:
    name = entry.rsplit("/", 1)[-1]
    if os.sep != "/":
        name = name.rsplit(os.sep, 1)[-1]
    return name


def is_native_support(entry: str) -> bool:
    return NATIVE_SUPPORT_PATTERN.match(entry_name(entry)) is not None


def find_native_support(entries: Iterable[str]) -> Optional[str]:
    for entry in entries:
        if is_native_support(entry):
            return entry
    return None
