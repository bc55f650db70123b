"""Custom exception classes for Hangar Dashboard."""

from typing import Optional


class HangarBaseError(Exception):
    """Base class for all custom exceptions in Hangar Dashboard."""

    pass


class ConfigurationError(HangarBaseError):
    """Raised when loading or validating the configuration file fails."""

    pass


class ApiError(HangarBaseError):
    """Structured error returned by the Hangar API.

    ``error_code`` comes from a mostly-closed set (``PROJECT_NAME_TAKEN``,
    ``IMAGE_SCAN_FAILED``, ``LINK_FAILED`` ...) and is translated for display
    by :func:`hangar_dashboard.i18n.Translator.error`.  ``details`` carries
    free text such as a security-scan report.
    """

    def __init__(self, error_code: str, details: Optional[str] = None):
        self.error_code = error_code
        self.details = details
        message = error_code
        if details:
            message += f": {details}"
        super().__init__(message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return self.error_code == other.error_code and self.details == other.details

    def __hash__(self) -> int:
        return hash((self.error_code, self.details))
