"""
Input guards for doc-reconcile.

The reconciliation engines only accept plain strings; anything else is a
caller contract violation and is rejected here, before it reaches the
algorithms.
"""

from typing import Any


# ---------------------------------------------------------------------------
# Error message formatting helpers
# ---------------------------------------------------------------------------


def format_validation_error(field_name: str, reason: str) -> str:
    """
    Generate consistent error message for validation failures.

    Args:
        field_name: Argument name (e.g., "base")
        reason: Description of validation failure (e.g., "must be a string")

    Returns:
        Formatted error message string
    """
    return f"{field_name} {reason}"


def require_text(field_name: str, value: Any) -> str:
    """
    Ensure *value* is a ``str``.

    Args:
        field_name: Argument name used in the error message
        value: The value to check

    Returns:
        The value unchanged

    Raises:
        TypeError: If the value is not a string (``None`` included)
    """
    if not isinstance(value, str):
        raise TypeError(
            format_validation_error(
                field_name,
                f"must be a string, got {type(value).__name__}",
            )
        )
    return value


def validate_label(label: str) -> tuple[bool, str]:
    """
    Validate a conflict-marker label.

    Args:
        label: The label to validate

    Returns:
        Tuple of (is_valid, error_message).
        Returns (True, "") if valid, (False, reason) if invalid.

    Validation rules:
        - Cannot be empty or whitespace-only
        - Cannot contain line breaks (markers are single lines)
    """
    if not label or not label.strip():
        return (
            False,
            format_validation_error("Label", "cannot be empty"),
        )

    if "\n" in label or "\r" in label:
        return (
            False,
            format_validation_error(
                "Label", "cannot contain line breaks"
            ),
        )

    return (True, "")
