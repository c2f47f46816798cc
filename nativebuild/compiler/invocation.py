import shlex
from pathlib import Path
from typing import List

from nativebuild.errors import ConfigError
from nativebuild.stack import StackID
from nativebuild.utils.subprocess import Execution

NATIVE_IMAGE = "native-image"

STATIC_LIBC_FLAG = "-H:+StaticExecutableWithDynamicLibC"
NAME_FLAG = "-H:Name="
CLASSPATH_FLAG = "-cp"
VERSION_FLAG = "--version"


def split_arguments(arguments: str) -> List[str]:
    try:
        return shlex.split(arguments)
    except ValueError as exc:
        raise ConfigError(
            f"Unable to parse native-image arguments {arguments!r}: {exc}"
        ) from exc


def build_invocation(
    *,
    arguments: str,
    stack_id: StackID,
    layer_path: Path,
    start_class: str,
    classpath: str,
) -> Execution:
    args = split_arguments(arguments)

    if stack_id.is_tiny:
        args.append(STATIC_LIBC_FLAG)

    args.extend([
        f"{NAME_FLAG}{Path(layer_path) / start_class}",
        CLASSPATH_FLAG,
        classpath,
        start_class,
    ])

    return Execution(
        command=NATIVE_IMAGE,
        args=tuple(args),
        dir=Path(layer_path),
    )


def version_invocation(layer_path: Path) -> Execution:
    return Execution(
        command=NATIVE_IMAGE,
        args=(VERSION_FLAG,),
        dir=Path(layer_path),
    )
