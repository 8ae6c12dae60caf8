"""Configuration errors for the event mailer."""

from typing import List, Optional


class ConfigurationError(Exception):
    """
    Raised when mail transport or application settings are missing or invalid.

    Configuration problems are fatal at startup: the mailer refuses to build a
    transport until they are fixed, so every dispatch would fail otherwise.
    Several problems are collected and reported together.
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
            errors: Individual problems found (e.g. one per missing variable)
            suggestions: Hints for fixing the problems
        """
        self.message = message
        self.errors = list(errors or [])
        self.suggestions = list(suggestions or [])
        super().__init__(self.render())

    def render(self) -> str:
        """Format the message followed by numbered errors and suggestions."""
        lines = [self.message]

        if self.errors:
            lines.append("\nProblems:")
            lines.extend(f"  {i}. {error}" for i, error in enumerate(self.errors, 1))

        if self.suggestions:
            lines.append("\nTo fix:")
            lines.extend(f"  - {suggestion}" for suggestion in self.suggestions)

        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
