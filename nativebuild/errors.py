class NativeBuildError(Exception):
    exit_code: int = 1

    def __init__(self, message: str):
        super().__init__(message)

class ConfigError(NativeBuildError):
    exit_code = 2


class IndexParseError(NativeBuildError):
    exit_code = 3

class CompilationError(NativeBuildError):
    exit_code = 20

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class CancellationError(NativeBuildError):
    exit_code = 21
