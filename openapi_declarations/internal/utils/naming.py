"""Утилиты для работы с именами типов, методов и полей"""

import keyword
import re
from typing import Any

_DELIMITERS = re.compile(r"[-_\s]")
_NON_WORD = re.compile(r"[^\w]", re.ASCII)

# Имена из аннотаций сгенерированного модуля и атрибуты pydantic BaseModel
_RESERVED_FIELD_NAMES = {
    "datetime",
    "json",
    "copy",
    "dict",
    "schema",
    "construct",
    "validate",
    "fields",
    "Any",
    "Dict",
    "List",
    "Literal",
    "Optional",
    "Union",
    "Field",
    "model_config",
    "model_fields",
    "model_fields_set",
    "model_computed_fields",
    "model_extra",
    "model_construct",
    "model_copy",
    "model_dump",
    "model_dump_json",
    "model_json_schema",
    "model_parametrized_name",
    "model_post_init",
    "model_rebuild",
    "model_validate",
    "model_validate_json",
    "model_validate_strings",
    "parse_obj",
    "parse_raw",
    "parse_file",
    "from_orm",
    "schema_json",
    "update_forward_refs",
}


def to_pascal_case(value: str) -> str:
    """
    Преобразование строки в PascalCase.

    Если в строке уже есть заглавные буквы, регистр внутри слов сохраняется,
    иначе каждое слово приводится к виду "Word".

    Examples:
        >>> to_pascal_case("pet-store")
        'PetStore'
        >>> to_pascal_case("user_HTTPStatus")
        'UserHTTPStatus'
    """
    words = _DELIMITERS.split(value)

    if re.search(r"[A-Z]", value):
        return "".join(
            word if word[:1].isupper() else word[:1].upper() + word[1:]
            for word in words
        )

    return "".join(word[:1].upper() + word[1:].lower() for word in words)


def to_camel_case(value: str) -> str:
    """Преобразование строки в camelCase"""
    pascal = to_pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def sanitize_type_name(name: str) -> str:
    """
    Очистка имени для использования как имени типа.

    Имена с суффиксом DTO, с "горбами" (UserProfile) или уже начинающиеся
    с заглавной буквы только очищаются от спецсимволов, остальные приводятся
    к PascalCase.
    """
    if re.search(r"DTO$", name) or re.search(r"[A-Z][a-z]+[A-Z]", name):
        sanitized = _NON_WORD.sub("", name)
    elif re.match(r"[A-Z]", name):
        sanitized = _NON_WORD.sub("", name)
    else:
        sanitized = to_pascal_case(re.sub(r"[^\w\s]", "", name, flags=re.ASCII))
        sanitized = _NON_WORD.sub("", sanitized)

    # Имя класса не может быть пустым или начинаться с цифры
    if not sanitized or sanitized[0].isdigit():
        sanitized = f"Model{sanitized}"

    return sanitized


def clean_identifier(name: str, reserved: set = None) -> str:
    """Очистка имени параметра или поля для использования в Python"""
    cleaned = _NON_WORD.sub("_", name)

    # Поля pydantic не могут начинаться с подчеркивания
    cleaned = cleaned.lstrip("_")

    if not cleaned:
        cleaned = "field"
    elif cleaned[0].isdigit():
        cleaned = f"field_{cleaned}"

    if keyword.iskeyword(cleaned) or cleaned in (reserved or set()):
        cleaned = f"{cleaned}_"

    return cleaned


def clean_field_name(name: str) -> str:
    """Имя поля pydantic модели"""
    return clean_identifier(name, _RESERVED_FIELD_NAMES)


def clean_method_name(operation_id: str) -> str:
    """Имя метода клиента из operationId"""
    name = _NON_WORD.sub("", to_camel_case(operation_id))

    if not name:
        return "operation"
    if name[0].isdigit():
        name = f"op{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"

    return name


def enum_member_name(value: Any) -> str:
    """Имя атрибута Enum из значения"""
    name = _NON_WORD.sub("_", str(value))

    if not name:
        return "EMPTY"

    # Имена вида _x_ зарезервированы Enum
    if name[0].isdigit() or name[0] == "_":
        name = f"VALUE_{name}"

    if keyword.iskeyword(name):
        name = f"{name}_"

    return name


def python_literal(value: Any) -> str:
    """Безопасный Python литерал для значения из спецификации"""
    if isinstance(value, bool) or value is None:
        return repr(value)
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return string_literal(value)
    return string_literal(str(value))


def string_literal(value: str) -> str:
    """Строковый литерал в двойных кавычках"""
    return (
        '"'
        + value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        + '"'
    )
