"""Утилиты для генератора"""

from .naming import (
    to_upper_identifier,
    to_lower_identifier,
    to_class_name,
    to_snake_identifier,
    to_module_name,
)

__all__ = [
    "to_upper_identifier",
    "to_lower_identifier",
    "to_class_name",
    "to_snake_identifier",
    "to_module_name",
]
