"""Custom exceptions for kb-lifecycle with actionable solutions."""


class LifecycleError(Exception):
    """Base exception for all kb-lifecycle errors with actionable solutions."""

    error_code = "E000"  # Default error code, overridden by subclasses

    def __init__(self, message: str, solution: str = None, docs_url: str = None):
        """
        Initialize error with actionable guidance.

        Args:
            message: Error description
            solution: Suggested solution or next steps
            docs_url: Link to relevant documentation
        """
        self.solution = solution
        self.docs_url = docs_url

        full_message = f"[{self.error_code}] {message}"
        if solution:
            full_message += f"\n\n💡 Solution: {solution}"
        if docs_url:
            full_message += f"\n📖 Docs: {docs_url}"

        super().__init__(full_message)


class ConfigurationError(LifecycleError):
    """Raised when kb-lifecycle settings are invalid."""

    error_code = "E001"


class ConfigFileError(LifecycleError):
    """Raised when a workspace config file cannot be read or written."""

    error_code = "E002"

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason

        message = f"Cannot use config file {path}: {reason}"
        solution = (
            "Check that the workspace root contains a valid dendron.yml.\n"
            "The top level of the file must be a mapping (key: value pairs)."
        )
        super().__init__(message, solution)


class MetadataStoreError(LifecycleError):
    """Raised when the metadata store cannot be read or persisted."""

    error_code = "E003"


class UnknownMetadataFieldError(MetadataStoreError):
    """Raised when a metadata field name is not part of the metadata record."""

    error_code = "E004"

    def __init__(self, field_name: str, known_fields=None):
        self.field_name = field_name

        solution = None
        if known_fields:
            solution = "Known fields: " + ", ".join(sorted(known_fields))
        super().__init__(f"Unknown metadata field '{field_name}'", solution)


class InvalidConfigPathError(LifecycleError):
    """Raised when a dotted config path is malformed."""

    error_code = "E005"

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Invalid config path '{path}': segments must be non-empty",
            "Use dotted paths such as 'workspace.journal.name'",
        )
