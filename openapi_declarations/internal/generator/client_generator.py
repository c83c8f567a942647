import logging
import re
from typing import Dict, List, Optional

from ..types.models import (
    ApiEndpoint,
    ApiParameter,
    ApiSchema,
    Declaration,
    Declarations,
    SchemaKind,
)
from ..types.schema_resolver import (
    SchemaResolver,
    docstring,
    forward_reference,
    is_primitive_type,
    scalar_type,
)
from ..utils.naming import (
    clean_identifier,
    clean_method_name,
    string_literal,
    to_pascal_case,
)
from .templates import templates

logger = logging.getLogger(__name__)

DEFAULT_TAG = "default"

# Имена аргументов и локальных переменных сгенерированного метода
RESERVED_ARGUMENTS = {
    "self",
    "query_params",
    "data",
    "headers",
    "options",
    "url",
    "query",
    "request_headers",
    "request_kwargs",
    "response",
    "content_type",
}


def group_endpoints_by_tag(
    endpoints: List[ApiEndpoint], default_tag: str = DEFAULT_TAG
) -> Dict[str, List[ApiEndpoint]]:
    """Группировка эндпоинтов по тегам (эндпоинт попадает в каждый свой тег)"""
    groups: Dict[str, List[ApiEndpoint]] = {}

    for endpoint in endpoints:
        for tag in endpoint.tags or [default_tag]:
            groups.setdefault(tag, []).append(endpoint)

    return groups


def client_class_name(tag: str) -> str:
    name = re.sub(r"[^\w]", "", to_pascal_case(tag), flags=re.ASCII)
    if not name or name[0].isdigit():
        name = f"Tag{name}"
    return f"{name}Api"


class ClientGenerator:
    """Генератор клиентов API: один класс на тег, один метод на эндпоинт"""

    def __init__(
        self,
        declarations: Declarations,
        schema_resolver: Optional[SchemaResolver] = None,
        default_tag: str = DEFAULT_TAG,
    ):
        self.declarations = declarations
        self.schema_resolver = schema_resolver or SchemaResolver(declarations)
        self.default_tag = default_tag

    def generate(self, endpoints: List[ApiEndpoint]) -> List[Declaration]:
        """Генерация объявлений клиентов для всех тегов"""
        generated = []

        for tag, tag_endpoints in group_endpoints_by_tag(
            endpoints, self.default_tag
        ).items():
            declaration = self._generate_client(tag, tag_endpoints)
            self.declarations.clients.append(declaration)
            generated.append(declaration)

            logger.debug(
                "Generated %s with %d methods", declaration.name, len(tag_endpoints)
            )

        return generated

    def _generate_client(self, tag: str, endpoints: List[ApiEndpoint]) -> Declaration:
        class_name = client_class_name(tag)
        dependencies: List[str] = []

        query_types = []
        methods = []
        for endpoint in endpoints:
            method_source, query_type = self._generate_method(
                class_name, endpoint, dependencies
            )
            methods.append(method_source)
            if query_type:
                query_types.append(query_type)

        lines = [
            f"class {class_name}(BaseApi):",
            docstring(f"Endpoints tagged {tag}"),
        ]

        for query_type in query_types:
            lines.extend(["", query_type])

        for method_source in methods:
            lines.extend(["", method_source])

        return Declaration(
            name=class_name,
            source_text="\n".join(lines),
            dependency_names=dependencies,
        )

    def _generate_method(self, class_name: str, endpoint: ApiEndpoint, dependencies):
        """Исходный код метода эндпоинта и TypedDict его query параметров"""
        method_name = clean_method_name(endpoint.operation_id)

        path_params = [p for p in endpoint.parameters if p.location == "path"]
        query_params = [p for p in endpoint.parameters if p.location == "query"]
        header_params = [p for p in endpoint.parameters if p.location == "header"]

        arguments = ["self"]
        doc_args = []

        path_arguments = {}
        for param in path_params:
            argument = clean_identifier(param.name, RESERVED_ARGUMENTS)
            param_type = self._parameter_type(param.schema)
            self._add_dependencies(dependencies, param_type)

            path_arguments[param.name] = argument
            arguments.append(f"{argument}: {param_type}")
            doc_args.append(f"{argument}: {param.description or param.name}")

        query_type = None
        if query_params:
            query_name = f"{to_pascal_case(method_name)}Query"
            query_type = self._generate_query_type(query_name, query_params, dependencies)
            arguments.append(f"query_params: {class_name}.{query_name}")
            doc_args.append("query_params: Query parameters")

        if endpoint.request_body:
            body_type = "Any"
            if endpoint.request_body.schema is not None:
                body_type = self.schema_resolver.resolve(endpoint.request_body.schema)

            # Тип тела упоминается только в документации
            arguments.append("data: Any")
            doc_args.append(f"data: Request body data ({body_type})")

        if header_params:
            arguments.append("headers: Optional[Dict[str, str]] = None")
            doc_args.append("headers: Custom headers")

        arguments.append("options: Optional[RequestOptions] = None")
        doc_args.append("options: Request options")

        signature = (
            f"async def {method_name}(\n"
            + "".join(f"    {argument},\n" for argument in arguments)
            + ") -> Any:"
        )

        body = [
            self._method_docstring(endpoint, doc_args),
            f"url = self.base_url + {string_literal(endpoint.path)}",
        ]
        body.extend(self._path_code(path_arguments))
        body.extend(self._query_code(query_params))
        body.extend(self._headers_code(header_params))
        body.extend(self._request_code(endpoint))
        body.append(templates.response_handling)

        source = signature + "\n" + _indent("\n\n".join(body), 4)

        return _indent(source, 4), query_type

    def _parameter_type(self, schema: Optional[ApiSchema]) -> str:
        """Тип аргумента: ссылки и enum через резолвер, остальное - простые типы"""
        if schema is None:
            return "Any"

        if schema.kind in (SchemaKind.REFERENCE, SchemaKind.ENUM):
            return self.schema_resolver.resolve(schema)

        if schema.type == "array" and schema.items is not None:
            return f"List[{self._parameter_type(schema.items)}]"

        return scalar_type(schema.type, schema.format)

    def _generate_query_type(
        self, query_name: str, params: List[ApiParameter], dependencies
    ) -> str:
        fields = []
        for param in params:
            param_type = self._parameter_type(param.schema)
            self._add_dependencies(dependencies, param_type)

            field_type = forward_reference(param_type)
            if param.required:
                field_type = f"Required[{field_type}]"

            fields.append(f"        {string_literal(param.name)}: {field_type},")

        return (
            f"    {query_name} = TypedDict(\n"
            f"        {string_literal(query_name)},\n"
            "        {\n"
            + "\n".join("    " + field for field in fields)
            + "\n        },\n"
            "        total=False,\n"
            "    )"
        )

    @staticmethod
    def _method_docstring(endpoint: ApiEndpoint, doc_args: List[str]) -> str:
        lines = [endpoint.summary or endpoint.operation_id]
        if endpoint.description:
            lines.extend(["", endpoint.description])

        lines.extend(["", "Args:"])
        lines.extend(f"    {arg}" for arg in doc_args)

        return docstring("\n".join(lines), indent="")

    @staticmethod
    def _path_code(path_arguments: Dict[str, str]) -> List[str]:
        if not path_arguments:
            return []

        lines = ["# Path parameters"]
        for name, argument in path_arguments.items():
            token = string_literal("{" + name + "}")
            lines.append(
                f'url = url.replace({token}, quote(_to_text({argument}), safe=""))'
            )

        return ["\n".join(lines)]

    @staticmethod
    def _query_code(params: List[ApiParameter]) -> List[str]:
        if not params:
            return []

        # Отсутствующие ключи и None не попадают в query строку
        lines = ["# Query parameters", "query = []"]
        for param in params:
            key = string_literal(param.name)
            lines.append(f"query.extend(_query_pairs({key}, query_params.get({key})))")
        lines.extend(["if query:", '    url += "?" + urlencode(query)'])

        return ["\n".join(lines)]

    @staticmethod
    def _headers_code(params: List[ApiParameter]) -> List[str]:
        lines = ["# Headers", 'request_headers = {"Content-Type": "application/json"}']

        for param in params:
            key = string_literal(param.name)
            if param.required:
                lines.append(
                    f"request_headers[{key}] = (headers or {{}}).get({key}) or \"\""
                )
            else:
                lines.extend(
                    [
                        f"if (headers or {{}}).get({key}):",
                        f"    request_headers[{key}] = headers[{key}]",
                    ]
                )

        if params:
            lines.append("request_headers.update(headers or {})")

        return ["\n".join(lines)]

    @staticmethod
    def _request_code(endpoint: ApiEndpoint) -> List[str]:
        method = string_literal(endpoint.method.upper())
        lines = [
            f"request_kwargs = {{\"method\": {method}, **(options or {{}})}}",
            'request_kwargs["url"] = url',
            'request_kwargs["headers"] = request_headers',
        ]

        if endpoint.request_body:
            lines.append('request_kwargs["content"] = json.dumps(_to_jsonable(data))')

        return ["\n".join(lines)]

    @staticmethod
    def _add_dependencies(dependencies: List[str], type_name: str):
        while type_name.startswith("List[") and type_name.endswith("]"):
            type_name = type_name[5:-1]

        if not is_primitive_type(type_name) and type_name not in dependencies:
            dependencies.append(type_name)


def _indent(text: str, spaces: int) -> str:
    prefix = " " * spaces
    return "\n".join(prefix + line if line.strip() else "" for line in text.splitlines())
