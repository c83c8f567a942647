import logging
import re
from typing import Dict, Any, List, Optional

import jsonref

from ..types.models import (
    ApiEndpoint,
    ApiInfo,
    ApiParameter,
    ApiPath,
    ApiRequestBody,
    ApiResponse,
    ApiSchema,
    ApiServer,
    ParsedSpec,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "options", "head")

# Ключи схемы, которые в Swagger 2.0 лежат прямо в параметре
_PARAMETER_SCHEMA_KEYS = ("type", "format", "enum", "items", "nullable", "x-nullable")


class OpenApiParser:
    """Парсер Swagger 2.0 / OpenAPI 3.x в каноническое представление"""

    def __init__(self, openapi_dict: Dict[str, Any]):
        self.openapi_dict = openapi_dict or {}

    def parse(self) -> ParsedSpec:
        """Парсинг спецификации в ParsedSpec"""
        spec = self.openapi_dict
        info = spec.get("info") or {}

        paths = {}
        for path, path_item in (spec.get("paths") or {}).items():
            paths[path] = self._parse_path(path, path_item or {})

        # OpenAPI 3.x хранит схемы в components, Swagger 2.0 - в definitions
        components = spec.get("components") or {}
        if components.get("schemas") is not None:
            raw_schemas = components["schemas"]
        else:
            raw_schemas = spec.get("definitions") or {}

        # Имена схем верхнего уровня сохраняются как есть
        schemas = {
            name: self._parse_schema(schema, name)
            for name, schema in raw_schemas.items()
        }

        logger.debug(
            "Parsed spec %r: %d paths, %d schemas",
            info.get("title"),
            len(paths),
            len(schemas),
        )

        return ParsedSpec(
            info=ApiInfo(
                title=info.get("title") or "API",
                version=info.get("version") or "1.0.0",
                description=info.get("description") or "",
            ),
            servers=self._parse_servers(spec),
            base_path=spec.get("basePath") or "",
            paths=paths,
            schemas=schemas,
        )

    def _parse_servers(self, spec: Dict[str, Any]) -> List[ApiServer]:
        if "servers" in spec:
            return [
                ApiServer(
                    url=server.get("url", ""),
                    description=server.get("description") or "",
                )
                for server in spec.get("servers") or []
            ]

        # Swagger 2.0: schemes + host + basePath
        if spec.get("host"):
            scheme = (spec.get("schemes") or ["https"])[0]
            return [
                ApiServer(url=f"{scheme}://{spec['host']}{spec.get('basePath') or ''}")
            ]

        return []

    def _parse_path(self, path: str, path_item: Dict[str, Any]) -> ApiPath:
        """Парсинг всех методов одного пути"""
        endpoints = []
        shared_parameters = path_item.get("parameters") or []

        for method in HTTP_METHODS:
            if path_item.get(method):
                endpoints.append(
                    self._parse_endpoint(
                        path, method, path_item[method], shared_parameters
                    )
                )

        return ApiPath(endpoints=endpoints)

    def _parse_endpoint(
        self,
        path: str,
        method: str,
        operation: Dict[str, Any],
        shared_parameters: List[Any] = (),
    ) -> ApiEndpoint:
        """Парсинг операции"""
        operation_id = operation.get("operationId") or (
            method + re.sub(r"[^a-zA-Z0-9]", "", path)
        )

        parameters = []
        request_body = None

        for raw_param in self._merge_parameters(
            shared_parameters, operation.get("parameters") or []
        ):
            # Swagger 2.0: тело запроса описано параметром in=body
            if raw_param.get("in") == "body":
                request_body = self._parse_swagger_body(
                    raw_param, operation, operation_id
                )
                continue

            parameters.append(self._parse_parameter(raw_param))

        if operation.get("requestBody"):
            request_body = self._parse_request_body(
                self._resolve_local(operation["requestBody"]), operation_id
            )

        responses = {}
        for status_code, raw_response in (operation.get("responses") or {}).items():
            responses[str(status_code)] = self._parse_response(
                self._resolve_local(raw_response or {}),
                operation,
                f"{operation_id}Response{status_code}",
            )

        return ApiEndpoint(
            path=path,
            method=method,
            operation_id=operation_id,
            summary=operation.get("summary") or "",
            description=operation.get("description") or "",
            parameters=parameters,
            request_body=request_body,
            responses=responses,
            tags=list(operation.get("tags") or []),
        )

    def _merge_parameters(
        self, shared: List[Any], own: List[Any]
    ) -> List[Dict[str, Any]]:
        """Параметры пути и операции; параметр операции переопределяет общий"""
        own = [self._resolve_local(param) for param in own]
        overridden = {(param.get("name"), param.get("in")) for param in own}

        merged = []
        for param in shared:
            param = self._resolve_local(param)
            if (param.get("name"), param.get("in")) not in overridden:
                merged.append(param)

        return merged + own

    def _parse_parameter(self, param: Dict[str, Any]) -> ApiParameter:
        name = param.get("name", "")

        schema = None
        if param.get("schema"):
            schema = self._parse_schema(param["schema"], name)
        elif "type" in param:
            # Swagger 2.0: type/format/enum/items указаны в самом параметре
            schema = self._parse_schema(
                {key: param[key] for key in _PARAMETER_SCHEMA_KEYS if key in param},
                name,
            )

        return ApiParameter(
            name=name,
            location=param.get("in", ""),
            required=bool(param.get("required", False)),
            description=param.get("description") or "",
            schema=schema,
        )

    def _parse_request_body(
        self, request_body: Dict[str, Any], operation_id: str
    ) -> Optional[ApiRequestBody]:
        """Тело запроса OpenAPI 3.x: берется первый content type"""
        content = request_body.get("content") or {}
        content_type = next(iter(content), None)

        if content_type is None or not (content[content_type] or {}).get("schema"):
            return None

        return ApiRequestBody(
            required=bool(request_body.get("required", False)),
            content_type=content_type,
            schema=self._parse_schema(
                content[content_type]["schema"], f"{operation_id}Request"
            ),
        )

    def _parse_swagger_body(
        self, param: Dict[str, Any], operation: Dict[str, Any], operation_id: str
    ) -> Optional[ApiRequestBody]:
        if not param.get("schema"):
            return None

        consumes = operation.get("consumes") or self.openapi_dict.get("consumes") or []

        return ApiRequestBody(
            required=bool(param.get("required", False)),
            content_type=consumes[0] if consumes else "application/json",
            schema=self._parse_schema(param["schema"], f"{operation_id}Request"),
        )

    def _parse_response(
        self, response: Dict[str, Any], operation: Dict[str, Any], name: str
    ) -> ApiResponse:
        description = response.get("description") or ""

        # OpenAPI 3.x
        if "content" in response:
            content = response.get("content") or {}
            content_type = next(iter(content), None)

            if content_type is not None and (content[content_type] or {}).get("schema"):
                return ApiResponse(
                    description=description,
                    content_type=content_type,
                    schema=self._parse_schema(content[content_type]["schema"], name),
                )

            return ApiResponse(description=description, content_type=content_type)

        # Swagger 2.0: content type берется из produces
        if response.get("schema"):
            produces = operation.get("produces") or self.openapi_dict.get("produces") or []

            return ApiResponse(
                description=description,
                content_type=produces[0] if produces else "application/json",
                schema=self._parse_schema(response["schema"], name),
            )

        return ApiResponse(description=description)

    def _parse_schema(self, schema: Any, name: str) -> ApiSchema:
        """Рекурсивный парсинг схемы с генерацией имен дочерних схем"""
        if not isinstance(schema, dict):
            # true/false схемы JSON Schema
            return ApiSchema(name=name)

        # Ссылка не раскрывается - остается только имя
        if "$ref" in schema:
            return ApiSchema(name=name, reference=schema["$ref"].split("/")[-1])

        schema_type = schema.get("type") or ""
        nullable = bool(schema.get("nullable") or schema.get("x-nullable"))

        # OpenAPI 3.1: type: ["string", "null"]
        if isinstance(schema_type, list):
            nullable = nullable or "null" in schema_type
            schema_type = next((t for t in schema_type if t != "null"), "")

        properties = {
            prop_name: self._parse_schema(
                prop_schema, f"{name}{prop_name[:1].upper()}{prop_name[1:]}"
            )
            for prop_name, prop_schema in (schema.get("properties") or {}).items()
        }

        items = None
        if schema_type == "array" and schema.get("items"):
            items = self._parse_schema(schema["items"], f"{name}Item")

        return ApiSchema(
            name=name,
            type=schema_type,
            format=schema.get("format"),
            enum=schema.get("enum"),
            nullable=nullable,
            properties=properties,
            required=list(schema.get("required") or []),
            items=items,
            all_of=self._parse_composition(schema, "allOf", name, "AllOf"),
            one_of=self._parse_composition(schema, "oneOf", name, "OneOf"),
            any_of=self._parse_composition(schema, "anyOf", name, "AnyOf"),
            description=schema.get("description") or "",
        )

    def _parse_composition(
        self, schema: Dict[str, Any], key: str, name: str, suffix: str
    ) -> Optional[List[ApiSchema]]:
        if key not in schema:
            return None

        return [
            self._parse_schema(member, f"{name}{suffix}{index}")
            for index, member in enumerate(schema[key] or [])
        ]

    def _resolve_local(self, node: Any) -> Dict[str, Any]:
        """
        Раскрытие локальной ссылки на параметр, тело запроса или ответ.

        Цепочки ссылок проходятся до объекта, вложенные $ref схем
        не раскрываются.
        """
        seen = set()

        while isinstance(node, dict) and isinstance(node.get("$ref"), str):
            ref = node["$ref"]
            if not ref.startswith("#/"):
                return node
            if ref in seen:
                logger.warning("Circular reference %s", ref)
                return {}
            seen.add(ref)

            reference = jsonref.JsonRef(node, loader=lambda _: self.openapi_dict)
            try:
                node = reference.resolve_pointer(self.openapi_dict, ref[1:])
            except jsonref.JsonRefError as e:
                logger.warning("Unresolved reference %s: %s", ref, e)
                return {}

        return node if isinstance(node, dict) else {}
