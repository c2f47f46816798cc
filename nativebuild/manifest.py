from pathlib import Path
from typing import Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from nativebuild.errors import ConfigError
from nativebuild.utils.fs import FilesystemError

START_CLASS = "Start-Class"
CLASSES = "Spring-Boot-Classes"
CLASSPATH_INDEX = "Spring-Boot-Classpath-Index"
LIB = "Spring-Boot-Lib"

REQUIRED_KEYS = (START_CLASS, CLASSES, CLASSPATH_INDEX, LIB)

DEFAULT_MANIFEST = Path("META-INF") / "MANIFEST.MF"


class ManifestProperties(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start_class: str = Field(..., alias=START_CLASS, min_length=1)
    classes: str = Field(..., alias=CLASSES, min_length=1)
    classpath_index: str = Field(..., alias=CLASSPATH_INDEX, min_length=1)
    lib: str = Field(..., alias=LIB, min_length=1)

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ManifestProperties":
        missing = [key for key in REQUIRED_KEYS if not values.get(key)]
        if missing:
            raise ConfigError(
                "Manifest is missing required keys: " + ", ".join(missing)
            )

        try:
            return cls.model_validate({key: values[key] for key in REQUIRED_KEYS})
        except ValidationError as exc:
            raise ConfigError(f"Invalid manifest: {exc}") from exc


def read_manifest(path: Path) -> Dict[str, str]:
    """Parse a JAR manifest into a flat mapping.

    Lines are ``Key: Value``; a line starting with a single space continues
    the previous value. Blank lines separate sections, and only the main
    section is returned.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(
            f"Failed to read manifest: {path}"
        ) from exc

    values: Dict[str, str] = {}
    key = None

    for line in content.splitlines():
        if not line.strip():
            if values:
                break
            continue

        if line.startswith(" "):
            if key is None:
                raise ConfigError(
                    f"Manifest continuation line without a key: {path}"
                )
            values[key] += line[1:]
            continue

        name, sep, value = line.partition(":")
        if not sep:
            raise ConfigError(
                f"Malformed manifest line in {path}: {line!r}"
            )
        key = name.strip()
        values[key] = value.lstrip()

    return values
