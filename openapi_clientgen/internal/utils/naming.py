"""Правила именования, общие для всех генераторов"""

import keyword
import re

_SEGMENT_SEPARATORS = re.compile(r"[_\-]")
_INVALID_CHARS = re.compile(r"[^0-9A-Za-z_\-]")
_ACRONYM_PATTERN = re.compile(r"([A-Z]+)([A-Z][a-z])")
_LOWER_UPPER_PATTERN = re.compile(r"([a-z\d])([A-Z])")

# Атрибуты BaseModel, которые нельзя перекрывать полями
_RESERVED_NAMES = frozenset(
    {
        "construct",
        "copy",
        "dict",
        "fields",
        "json",
        "model_config",
        "model_fields",
        "schema",
        "self",
        "validate",
    }
)


def to_upper_identifier(value: str) -> str:
    """
    PascalCase идентификатор из произвольной строки.

    Префикс вида "#/components/schemas/" отбрасывается. Строки с "_" или "-"
    разбиваются на части, каждая часть пишется с заглавной буквы, остаток
    части приводится к нижнему регистру. Иначе заглавной становится только
    первая буква.

    Examples:
        >>> to_upper_identifier("#/components/schemas/user_dto")
        'UserDto'
        >>> to_upper_identifier("listUsers")
        'ListUsers'
    """
    if not value:
        return value

    if "/" in value:
        value = value.split("/")[-1]

    if "_" in value or "-" in value:
        return "".join(
            part[0].upper() + part[1:].lower()
            for part in _SEGMENT_SEPARATORS.split(value)
            if part
        )

    return value[:1].upper() + value[1:]


def to_lower_identifier(value: str) -> str:
    """camelCase идентификатор: to_upper_identifier с маленькой первой буквой"""
    upper = to_upper_identifier(value)
    if not upper:
        return upper

    return upper[0].lower() + upper[1:]


def to_class_name(value: str) -> str:
    """Имя Python класса для схемы или ссылки на схему"""
    segment = value.split("/")[-1] if value else ""
    name = to_upper_identifier(_INVALID_CHARS.sub("_", segment))

    if not name:
        return "Model"
    if name[0].isdigit():
        return f"Model{name}"

    return name


def _camel_to_snake(name: str) -> str:
    name = _ACRONYM_PATTERN.sub(r"\1_\2", name)
    return _LOWER_UPPER_PATTERN.sub(r"\1_\2", name).lower()


def to_snake_identifier(value: str) -> str:
    """
    snake_case идентификатор для параметров, полей и методов.

    Ключевые слова Python и атрибуты BaseModel получают суффикс "_".

    Examples:
        >>> to_snake_identifier("X-Trace-Id")
        'x_trace_id'
        >>> to_snake_identifier("class")
        'class_'
    """
    cleaned = _INVALID_CHARS.sub("_", value or "")
    name = _camel_to_snake(to_upper_identifier(cleaned))

    if not name:
        return "value"
    if name[0].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name) or name in _RESERVED_NAMES:
        name = f"{name}_"

    return name


def to_module_name(class_name: str) -> str:
    """Имя файла модели без расширения"""
    return _camel_to_snake(class_name) or "model"
