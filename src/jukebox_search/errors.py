"""Exception hierarchy for track resolution."""


class SearchError(Exception):
    """Base exception for all resolution errors."""


class ConfigError(SearchError):
    """Invalid or missing configuration."""


class WorkingDirError(SearchError):
    """A per-invocation working directory could not be created."""

    def __init__(self, path, reason: str) -> None:
        super().__init__(f"Cannot create working directory {path}: {reason}")
        self.path = path
        self.reason = reason


class ExternalToolError(SearchError):
    """The external metadata tool could not run to completion."""

    def __init__(self, tool: str, exit_code: int, stderr: str) -> None:
        super().__init__(f"{tool} exited with code {exit_code}: {stderr}")
        self.tool = tool
        self.exit_code = exit_code
        self.stderr = stderr


class ApiError(SearchError):
    """The YouTube Data API answered with an unexpected status or not at all."""

    def __init__(self, status_code: int | None, message: str) -> None:
        prefix = f"Error {status_code}" if status_code is not None else "Error"
        super().__init__(f"{prefix}: {message}")
        self.status_code = status_code
        self.message = message
