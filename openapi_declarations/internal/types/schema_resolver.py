import logging
import re
from typing import List, Optional

from .models import ApiSchema, Declaration, Declarations, SchemaKind
from ..utils.naming import (
    clean_field_name,
    enum_member_name,
    python_literal,
    sanitize_type_name,
    string_literal,
)

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = {
    "str",
    "int",
    "float",
    "bool",
    "Any",
    "None",
    "bytes",
    "datetime.date",
    "datetime.datetime",
    "Dict[str, Any]",
}


def is_primitive_type(type_name: str) -> bool:
    """Проверка, что тип встроенный и не требует объявления"""
    if type_name.startswith("List[") and type_name.endswith("]"):
        return is_primitive_type(type_name[5:-1])

    return type_name in PRIMITIVE_TYPES


def scalar_type(schema_type: Optional[str], schema_format: Optional[str] = None) -> str:
    """Таблица соответствия простых типов OpenAPI типам Python"""
    if not schema_type:
        return "Dict[str, Any]"

    schema_type = schema_type.lower()

    if schema_type in ("integer", "number"):
        if schema_format == "int64" or schema_type == "integer":
            return "int"
        return "float"

    if schema_type == "string":
        if schema_format == "date":
            return "datetime.date"
        if schema_format == "date-time":
            return "datetime.datetime"
        if schema_format == "binary":
            return "bytes"
        return "str"

    type_mapping = {
        "boolean": "bool",
        "array": "List[Any]",
        "null": "None",
    }

    return type_mapping.get(schema_type, "Dict[str, Any]")


def forward_reference(type_name: str) -> str:
    """Тип для выражений уровня модуля: объявленные имена берутся в кавычки"""
    if is_primitive_type(type_name):
        return type_name

    return string_literal(type_name)


def docstring(text: str, indent: str = "    ") -> str:
    text = text.strip().replace("\\", "\\\\").replace('"', '\\"')
    if "\n" not in text:
        return f'{indent}"""{text}"""'

    body = "\n".join(
        (indent + line) if line.strip() else "" for line in text.splitlines()
    )
    return f'{indent}"""\n{body}\n{indent}"""'


class SchemaResolver:
    """
    Разрешение схем в имена типов.

    Каждый вызов resolve() возвращает имя типа и при необходимости добавляет
    одно новое объявление в накопитель. Дочерние схемы разрешаются раньше
    родителя, поэтому зависимости всегда объявлены до зависимых типов.
    Повторное разрешение ищет объявление только по имени.
    """

    def __init__(self, declarations: Declarations):
        self.declarations = declarations
        self._handlers = {
            SchemaKind.ENUM: self._resolve_enum,
            SchemaKind.OBJECT: self._resolve_object,
            SchemaKind.ARRAY: self._resolve_array,
            SchemaKind.ALL_OF: self._resolve_all_of,
            SchemaKind.ONE_OF: self._resolve_union,
            SchemaKind.ANY_OF: self._resolve_union,
        }

    def resolve(self, schema: ApiSchema) -> str:
        """Получение имени типа для схемы"""
        kind = schema.kind

        if kind is SchemaKind.REFERENCE:
            return schema.reference

        existing = self.declarations.find_existing(sanitize_type_name(schema.name))
        if existing:
            return existing

        handler = self._handlers.get(kind)
        if handler is None:
            return scalar_type(schema.type, schema.format)

        return handler(schema)

    def _resolve_enum(self, schema: ApiSchema) -> str:
        name = sanitize_type_name(schema.name)
        values = schema.enum

        if not all(isinstance(value, str) for value in values):
            # Числовые, булевы и смешанные значения - Literal
            literals = ", ".join(python_literal(value) for value in values)
            return self._declare(
                self.declarations.aliases,
                name,
                f"{name} = Literal[{literals}]",
            )

        lines = [f"class {name}(str, Enum):"]
        if schema.description:
            lines.extend([docstring(schema.description), ""])

        members = set()
        for value in values:
            member = enum_member_name(value)
            while member in members:
                member += "_"
            members.add(member)

            lines.append(f"    {member} = {string_literal(value)}")

        return self._declare(self.declarations.enums, name, "\n".join(lines))

    def _resolve_object(self, schema: ApiSchema) -> str:
        name = sanitize_type_name(schema.name)
        dependencies = []
        fields = []
        has_aliases = False

        for prop_name, prop_schema in schema.properties.items():
            prop_type = self.resolve(prop_schema)
            self._add_dependency(dependencies, prop_type)

            field_line, aliased = self._render_field(
                prop_name,
                prop_type,
                required=prop_name in schema.required,
                nullable=prop_schema.nullable,
            )
            has_aliases = has_aliases or aliased
            fields.append(field_line)

        lines = [f"class {name}(BaseModel):"]
        if schema.description:
            lines.extend([docstring(schema.description), ""])

        if not fields:
            # Объект без свойств - произвольный набор полей
            lines.append('    model_config = ConfigDict(extra="allow")')
        elif has_aliases:
            lines.extend(["    model_config = ConfigDict(populate_by_name=True)", ""])

        lines.extend(fields)

        return self._declare(
            self.declarations.structural, name, "\n".join(lines), dependencies
        )

    @staticmethod
    def _render_field(prop_name: str, prop_type: str, required: bool, nullable: bool):
        """Строка поля pydantic модели и признак наличия alias"""
        annotation = prop_type
        if nullable or not required:
            annotation = f"Optional[{prop_type}]"

        field_name = clean_field_name(prop_name)

        # Имя поля не должно перекрывать имя типа в аннотации
        while re.search(rf"\b{re.escape(field_name)}\b", annotation):
            field_name += "_"

        aliased = field_name != prop_name
        alias = f"alias={string_literal(prop_name)}"

        if required:
            default = f" = Field({alias})" if aliased else ""
        else:
            default = f" = Field(default=None, {alias})" if aliased else " = None"

        return f"    {field_name}: {annotation}{default}", aliased

    def _resolve_array(self, schema: ApiSchema) -> str:
        item_type = self.resolve(schema.items)
        name = sanitize_type_name(schema.name)

        dependencies = []
        self._add_dependency(dependencies, item_type)

        return self._declare(
            self.declarations.aliases,
            name,
            f"{name} = List[{forward_reference(item_type)}]",
            dependencies,
        )

    def _resolve_all_of(self, schema: ApiSchema) -> str:
        """allOf - наследование от всех составных моделей"""
        member_types = [self.resolve(member) for member in schema.all_of]
        name = sanitize_type_name(schema.name)

        dependencies = []
        for member_type in member_types:
            self._add_dependency(dependencies, member_type)

        if not dependencies:
            return self._declare(
                self.declarations.aliases, name, f"{name} = {member_types[0]}"
            )

        lines = [f"class {name}({', '.join(dependencies)}):"]
        if schema.description:
            lines.append(docstring(schema.description))
        else:
            lines.append("    pass")

        return self._declare(
            self.declarations.aliases,
            name,
            "\n".join(lines),
            dependencies,
            bases=dependencies,
        )

    def _resolve_union(self, schema: ApiSchema) -> str:
        """oneOf и anyOf - одинаковый Union без проверки исключительности"""
        members = schema.one_of if schema.kind is SchemaKind.ONE_OF else schema.any_of
        member_types = [self.resolve(member) for member in members]
        name = sanitize_type_name(schema.name)

        dependencies = []
        for member_type in member_types:
            self._add_dependency(dependencies, member_type)

        union = ", ".join(forward_reference(t) for t in member_types)

        return self._declare(
            self.declarations.aliases,
            name,
            f"{name} = Union[{union}]",
            dependencies,
        )

    @staticmethod
    def _add_dependency(dependencies: List[str], type_name: str):
        if not is_primitive_type(type_name) and type_name not in dependencies:
            dependencies.append(type_name)

    def _declare(
        self,
        target: List[Declaration],
        name: str,
        source_text: str,
        dependencies: List[str] = None,
        bases: List[str] = None,
    ) -> str:
        target.append(
            Declaration(
                name=name,
                source_text=source_text,
                dependency_names=list(dependencies or []),
                base_names=list(bases or []),
            )
        )
        logger.debug("Declared %s (depends on %s)", name, dependencies or [])

        return name
