"""Exceptions raised by the collector. Any of them aborts the run."""


class MacstatError(RuntimeError):
    """Base class for collector failures."""


class CommandError(MacstatError):
    """A command could not be started or exited with a nonzero status."""

    def __init__(self, argv: list[str], returncode: int | None, stderr: str = "") -> None:
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr.strip()
        if returncode is None:
            message = f"could not run {' '.join(argv)}"
        else:
            message = f"{' '.join(argv)} exited with status {returncode}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class MissingToolError(MacstatError):
    """An external helper program is not installed where it is expected."""

    def __init__(self, path: str, remedy: str) -> None:
        self.path = path
        self.remedy = remedy
        super().__init__(f"{path} not found. {remedy}")


class UnexpectedOutputError(MacstatError):
    """A command's output does not have the layout it is parsed with."""

    def __init__(self, tool: str, reason: str) -> None:
        self.tool = tool
        self.reason = reason
        super().__init__(f"unexpected output from {tool}: {reason}")
