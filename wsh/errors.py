class ShellError(Exception):
    """Base class for errors reported to the user without leaving the shell."""


class ValidationError(ShellError):
    """Malformed command line or built-in invocation."""


class ResourceError(ShellError):
    """A pipe or a process could not be allocated."""


class ExecImageError(ShellError):
    """The program of one stage could not be started."""

    def __init__(self, program, reason, status):
        super().__init__(f"{program}: {reason}")
        self.status = status


class StateError(ShellError):
    """Request that does not match the current shell state."""
