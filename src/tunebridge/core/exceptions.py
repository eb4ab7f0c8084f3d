"""Core exceptions for configuration handling.

Host execution and batch alignment errors live next to the code that raises
them (``services.host``); this module only holds errors shared by the
configuration layer and the template loader.
"""


class ConfigurationError(Exception):
    """Raised when configuration loading or parsing fails."""

    def __init__(self, message: str, config_path: str | None = None) -> None:
        """Initialize the configuration error.

        Args:
            message: Error description
            config_path: Path to the config file that caused the error

        """
        super().__init__(message)
        self.config_path = config_path


class TemplateError(ConfigurationError):
    """Raised when a script template is missing or malformed."""
