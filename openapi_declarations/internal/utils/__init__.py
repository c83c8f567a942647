"""Утилиты для генератора"""

from .naming import (
    to_pascal_case,
    to_camel_case,
    sanitize_type_name,
    clean_identifier,
    clean_field_name,
    clean_method_name,
    enum_member_name,
    python_literal,
    string_literal,
)

__all__ = [
    "to_pascal_case",
    "to_camel_case",
    "sanitize_type_name",
    "clean_identifier",
    "clean_field_name",
    "clean_method_name",
    "enum_member_name",
    "python_literal",
    "string_literal",
]
