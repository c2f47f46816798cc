import math
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nativebuild.errors import ConfigError
from nativebuild.stack import StackID

ARGUMENTS_ENV = "BP_NATIVE_IMAGE_BUILD_ARGUMENTS"
LEGACY_ARGUMENTS_ENV = "BP_BOOT_NATIVE_IMAGE_BUILD_ARGUMENTS"
STACK_ID_ENV = "CNB_STACK_ID"
TIMEOUT_ENV = "BP_NATIVE_IMAGE_TIMEOUT"

DEFAULT_LAYER_NAME = "native-image"


class BuildConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    application_root: Path = Field(
        ...,
        description="Exploded application directory",
    )
    layers_root: Path = Field(
        ...,
        description="Directory under which build layers are allocated",
    )
    arguments: str = Field(
        default="",
        description="Additional native-image arguments, shell quoted",
    )
    stack_id: StackID = Field(
        default=StackID.BIONIC,
        description="Stack the image is built for",
    )
    timeout: Optional[float] = Field(
        default=None,
        description="Seconds to wait for native-image before cancelling",
    )
    layer_name: str = Field(
        default=DEFAULT_LAYER_NAME,
        description="Name of the layer receiving the compiled executable",
    )

    @field_validator("application_root")
    @classmethod
    def validate_application_root(cls, value: Path) -> Path:
        if not value.exists():
            raise ConfigError(f"Application root does not exist: {value}")
        if not value.is_dir():
            raise ConfigError(f"Application root is not a directory: {value}")
        return value

    @field_validator("stack_id", mode="before")
    @classmethod
    def parse_stack_id(cls, value):
        return StackID.parse(value)

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and (not math.isfinite(value) or value <= 0):
            raise ConfigError("Timeout must be a positive, finite number of seconds")
        return value

    @field_validator("layer_name")
    @classmethod
    def validate_layer_name(cls, value: str) -> str:
        if not value:
            raise ConfigError("Layer name cannot be empty")
        if "/" in value or "\\" in value:
            raise ConfigError("Layer name must not contain path separators")
        return value

    @classmethod
    def from_environment(
        cls,
        *,
        application_root: Path,
        layers_root: Path,
        environ: Optional[Mapping[str, str]] = None,
        **overrides,
    ) -> "BuildConfig":
        env = os.environ if environ is None else environ

        values = {
            "application_root": application_root,
            "layers_root": layers_root,
            "arguments": env.get(ARGUMENTS_ENV, env.get(LEGACY_ARGUMENTS_ENV, "")),
            "stack_id": env.get(STACK_ID_ENV, StackID.BIONIC.value),
        }

        raw_timeout = env.get(TIMEOUT_ENV)
        if raw_timeout:
            try:
                values["timeout"] = float(raw_timeout)
            except ValueError as exc:
                raise ConfigError(
                    f"{TIMEOUT_ENV} must be a number, got {raw_timeout!r}"
                ) from exc

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
