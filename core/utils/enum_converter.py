"""
Enum conversion utilities.

Provides standardized methods for converting between enums and strings,
with support for case-insensitive parsing and fallback defaults.
"""

from typing import Any, List, Optional, Type, TypeVar, Union

from core.exceptions import InvalidArgument

T = TypeVar("T")


def parse_enum(value: Any, enum_class: Type[T], default: T, normalize: bool = True) -> T:
    """
    Parse value to enum, falling back to default when value is missing.

    Args:
        value: Value to parse (string, enum, or None)
        enum_class: Enum class to parse to
        default: Enum value returned when value is None
        normalize: Whether to lowercase string before parsing
            (for case-insensitive matching)

    Returns:
        Parsed enum value or default

    Raises:
        InvalidArgument: If value is not a member of enum_class

    Example:
        >>> parse_enum("INSET", ThumbnailMode, ThumbnailMode.OUTBOUND)
        >>> # Returns ThumbnailMode.INSET for "inset", "Inset", "INSET"
    """
    # Already an enum instance
    if isinstance(value, enum_class):
        return value

    # None or missing value
    if value is None:
        return default

    try:
        str_value = value.lower() if normalize else value
        return enum_class(str_value)
    except (ValueError, AttributeError):
        choices = ", ".join(member.value for member in enum_class)
        raise InvalidArgument(f"Unknown {enum_class.__name__} '{value}' (expected one of: {choices})")


def enum_to_string(value: Any) -> str:
    """
    Convert enum to string value, or pass through if already string.

    Example:
        >>> enum_to_string(EngineDriver.PILLOW)
        >>> # Returns "pillow"
    """
    return value.value if hasattr(value, "value") else value


def ensure_list(values: Optional[Union[str, List[Any]]]) -> List[str]:
    """
    Ensure a driver setting is a list of strings.

    A single name becomes a one element list; a comma separated string is
    split; enum members are converted to their values.

    Example:
        >>> ensure_list("pillow, software")
        >>> # Returns ["pillow", "software"]
    """
    if values is None:
        return []
    if isinstance(values, str):
        return [part.strip() for part in values.split(",") if part.strip()]
    return [enum_to_string(value) for value in values]
