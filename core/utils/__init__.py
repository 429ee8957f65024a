"""
Utility modules for core functionality.

Modules:
- enum_converter: Enum parsing and conversion
"""

from .enum_converter import ensure_list, enum_to_string, parse_enum

__all__ = [
    "ensure_list",
    "enum_to_string",
    "parse_enum",
]
