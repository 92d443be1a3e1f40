"""Custom exception types for terraunit.

This module defines the exception hierarchy for terraunit errors, enabling
precise error handling and contextual error messages throughout the application.

Exception Hierarchy:
    TerraUnitError (base)
    ├── ValidationError - Deployment unit fields malformed or out of range
    ├── UnsupportedProviderError - Provider selector is not aws, gcp or azure
    ├── TranslationError - Lowered declarations reference unknown addresses
    ├── UnitFileError - Unit file missing or cannot be parsed
    └── ConfigurationError - Provider configuration module cannot be loaded
"""

from typing import Any, Dict, List, Optional, Tuple


class TerraUnitError(Exception):
    """Base exception for all terraunit-specific errors.

    Attributes:
        message: Human-readable error description
        context: Additional contextual information (e.g., unit names, file paths)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Initialize TerraUnitError.

        Args:
            message: Human-readable error description
            context: Optional dict with additional context (unit name, path, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class ValidationError(TerraUnitError):
    """Raised when a deployment unit violates a field constraint.

    ``field`` is the dotted path of the first failing field (for example
    ``resources.cpu``); ``errors`` holds every ``(field, message)`` pair found.

    Examples:
        - resources.cpu is zero or negative
        - scaling.min_instances greater than scaling.max_instances
        - container_image left empty
    """

    def __init__(
        self,
        message: str,
        field: str = "",
        errors: Optional[List[Tuple[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.errors = list(errors) if errors else [(field, message)]
        self.field = field or self.errors[0][0]

    def __str__(self) -> str:
        base = super().__str__()
        if self.field and not self.message.startswith(self.field):
            return f"{self.field}: {base}"
        return base


class UnsupportedProviderError(TerraUnitError):
    """Raised when a provider selector is not one of aws, gcp or azure.

    Examples:
        - provider: "oracle"
        - a GCP unit handed to the AWS translator
    """

    pass


class TranslationError(TerraUnitError):
    """Raised when lowered declarations cannot be ordered.

    Examples:
        - A declaration references an address never declared
        - Two declarations reference each other
    """

    pass


class UnitFileError(TerraUnitError):
    """Raised when a unit file cannot be read.

    Examples:
        - File does not exist
        - Invalid YAML, JSON or HCL2 syntax
        - Top level is not a mapping
    """

    pass


class ConfigurationError(TerraUnitError):
    """Raised when provider configuration loading fails."""

    pass
