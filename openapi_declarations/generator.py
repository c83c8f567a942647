"""
Главный модуль генератора - чистый интерфейс
"""

import logging
from typing import Dict, Any

from .internal.generator.client_generator import DEFAULT_TAG, ClientGenerator
from .internal.parser.openapi import OpenApiParser
from .internal.types.models import Declarations, ParsedSpec
from .internal.types.schema_resolver import SchemaResolver

logger = logging.getLogger(__name__)


class ApiClientGenerator:
    """Чистый интерфейс для генерации объявлений из OpenAPI спецификации"""

    def __init__(self, openapi_spec: Dict[str, Any], default_tag: str = DEFAULT_TAG):
        self.parser = OpenApiParser(openapi_spec)
        self.default_tag = default_tag
        self.parsed_spec: ParsedSpec = None

    def parse(self) -> ParsedSpec:
        if self.parsed_spec is None:
            self.parsed_spec = self.parser.parse()
        return self.parsed_spec

    def generate(self) -> Declarations:
        """Генерация объявлений (каждый вызов - новый накопитель)"""
        return generate_declarations(self.parse(), self.default_tag)


def generate_declarations(
    parsed_spec: ParsedSpec, default_tag: str = DEFAULT_TAG
) -> Declarations:
    """
    Генерация объявлений из разобранной спецификации.

    Сначала разрешаются все схемы верхнего уровня в порядке объявления,
    затем по эндпоинтам строятся клиенты. Все объявления пишутся в один
    новый накопитель.
    """
    declarations = Declarations()
    resolver = SchemaResolver(declarations)

    for schema in parsed_spec.schemas.values():
        resolver.resolve(schema)

    ClientGenerator(declarations, resolver, default_tag).generate(
        parsed_spec.endpoints()
    )

    logger.debug(
        "Generated %d structural, %d aliases, %d enums, %d clients",
        len(declarations.structural),
        len(declarations.aliases),
        len(declarations.enums),
        len(declarations.clients),
    )

    return declarations


def generate_client(openapi_spec: Dict[str, Any]) -> Declarations:
    """Создание объявлений напрямую из словаря спецификации"""
    return ApiClientGenerator(openapi_spec).generate()
