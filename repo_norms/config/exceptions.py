"""Custom exceptions for configuration management."""

from typing import List, Optional

from pydantic import ValidationError


class ConfigurationError(Exception):
    """
    Exception raised when configuration validation fails.

    Configuration errors are always fatal: they are raised before any record
    is extracted, so an analysis never runs on a partially valid setup.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Primary error message
            errors: List of specific validation errors
            suggestions: List of helpful suggestions to fix the errors
        """
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            for i, error in enumerate(self.errors, 1):
                parts.append(f"  {i}. {error}")

        if self.suggestions:
            parts.append("\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"  - {suggestion}")

        return "\n".join(parts)

    @classmethod
    def from_validation_error(
        cls,
        message: str,
        error: ValidationError,
        suggestions: Optional[List[str]] = None,
    ) -> "ConfigurationError":
        """Translate a pydantic ValidationError into readable configuration errors.

        Args:
            message: Primary error message
            error: The pydantic error to translate
            suggestions: Suggestions to attach

        Returns:
            ConfigurationError listing one line per failed location
        """
        errors = []
        for detail in error.errors():
            location = " -> ".join(str(loc) for loc in detail["loc"])
            error_type = detail["type"]

            if error_type == "missing":
                errors.append(f"Missing required field: {location}")
            elif error_type in ("int_type", "int_parsing", "bool_type", "bool_parsing", "list_type"):
                expected = error_type.split("_")[0]
                errors.append(
                    f"Invalid type for '{location}': expected {expected}, got {detail.get('input')!r}"
                )
            elif error_type == "enum":
                errors.append(f"Invalid value for '{location}': {detail['msg']}")
            elif location:
                errors.append(f"{location}: {detail['msg']}")
            else:
                errors.append(detail["msg"])

        return cls(message, errors=errors, suggestions=suggestions)
