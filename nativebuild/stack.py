from enum import Enum


class StackID(str, Enum):
    """Base image families a build can target.

    Only the tiny stack changes the compiler invocation: its image carries
    glibc and little else, so everything but libc is linked statically.
    """

    BIONIC = "io.buildpacks.stacks.bionic"
    JAMMY = "io.buildpacks.stacks.jammy"
    TINY = "io.paketo.stacks.tiny"
    UNKNOWN = ""

    @classmethod
    def parse(cls, value: "str | StackID | None") -> "StackID":
        if isinstance(value, StackID):
            return value
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_tiny(self) -> bool:
        return self is StackID.TINY
