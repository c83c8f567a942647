from enum import Enum
from typing import Optional, Union, Any, Dict, List
from dataclasses import dataclass, field

from pydantic import BaseModel


class SchemaKind(str, Enum):
    """Вид узла схемы в порядке проверки резолвером"""

    REFERENCE = "reference"
    ENUM = "enum"
    OBJECT = "object"
    ARRAY = "array"
    ALL_OF = "allOf"
    ONE_OF = "oneOf"
    ANY_OF = "anyOf"
    SCALAR = "scalar"


@dataclass(frozen=True)
class ApiSchema:
    """Схема из спецификации в каноническом виде"""

    name: str
    type: str = ""
    format: Optional[str] = None
    enum: Optional[List[Any]] = None
    nullable: bool = False
    properties: Dict[str, "ApiSchema"] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)
    items: Optional["ApiSchema"] = None
    all_of: Optional[List["ApiSchema"]] = None
    one_of: Optional[List["ApiSchema"]] = None
    any_of: Optional[List["ApiSchema"]] = None
    reference: Optional[str] = None
    description: str = ""

    @property
    def kind(self) -> SchemaKind:
        if self.reference:
            return SchemaKind.REFERENCE
        if self.enum:
            return SchemaKind.ENUM
        if self.type == "object" or self.properties:
            return SchemaKind.OBJECT
        if self.type == "array" and self.items is not None:
            return SchemaKind.ARRAY
        if self.all_of:
            return SchemaKind.ALL_OF
        if self.one_of:
            return SchemaKind.ONE_OF
        if self.any_of:
            return SchemaKind.ANY_OF
        return SchemaKind.SCALAR


@dataclass(frozen=True)
class ApiParameter:
    """Параметр операции"""

    name: str
    location: str
    required: bool = False
    description: str = ""
    schema: Optional[ApiSchema] = None


@dataclass(frozen=True)
class ApiRequestBody:
    required: bool
    content_type: str
    schema: Optional[ApiSchema] = None


@dataclass(frozen=True)
class ApiResponse:
    description: str = ""
    content_type: Optional[str] = None
    schema: Optional[ApiSchema] = None


@dataclass(frozen=True)
class ApiEndpoint:
    """Операция (метод + путь) из спецификации"""

    path: str
    method: str
    operation_id: str
    summary: str = ""
    description: str = ""
    parameters: List[ApiParameter] = field(default_factory=list)
    request_body: Optional[ApiRequestBody] = None
    responses: Dict[str, ApiResponse] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ApiPath:
    endpoints: List[ApiEndpoint] = field(default_factory=list)


@dataclass(frozen=True)
class ApiInfo:
    title: str = "API"
    version: str = "1.0.0"
    description: str = ""


@dataclass(frozen=True)
class ApiServer:
    url: str
    description: str = ""


@dataclass(frozen=True)
class ParsedSpec:
    """Каноническое представление спецификации (Swagger 2.0 / OpenAPI 3.x)"""

    info: ApiInfo = field(default_factory=ApiInfo)
    servers: List[ApiServer] = field(default_factory=list)
    base_path: str = ""
    paths: Dict[str, ApiPath] = field(default_factory=dict)
    schemas: Dict[str, ApiSchema] = field(default_factory=dict)

    def endpoints(self) -> List[ApiEndpoint]:
        """Все эндпоинты в порядке путей и методов"""
        return [
            endpoint for api_path in self.paths.values() for endpoint in api_path.endpoints
        ]


@dataclass
class Declaration:
    """Сгенерированное объявление: модель, enum, алиас или клиент"""

    name: str
    source_text: str
    dependency_names: List[str] = field(default_factory=list)
    # Базовые классы, которые обязаны стоять в модуле раньше объявления
    base_names: List[str] = field(default_factory=list)


@dataclass
class Declarations:
    """Накопитель объявлений одного запуска генерации"""

    structural: List[Declaration] = field(default_factory=list)
    aliases: List[Declaration] = field(default_factory=list)
    enums: List[Declaration] = field(default_factory=list)
    clients: List[Declaration] = field(default_factory=list)

    def find_existing(self, name: str) -> Optional[str]:
        """Поиск уже объявленного типа по имени (первое совпадение)"""
        for declaration in self.structural + self.aliases + self.enums:
            if declaration.name == name:
                return declaration.name

        return None

    def type_names(self) -> List[str]:
        return [d.name for d in self.structural + self.aliases + self.enums]


class CodeBlock(BaseModel):
    order: int = 0
    code: str = "pass"

    def __str__(self):
        return self.code.replace("\t", "    ")


class CodeFile(BaseModel):
    file_name: str

    docstring: Optional[str] = None
    imports: list[str] = []
    code_blocks: list[CodeBlock] = []

    def __str__(self):
        return (
            "\n\n\n".join(
                filter(
                    bool,
                    [
                        (f'"""{self.docstring}"""' if self.docstring else ""),
                        ("\n".join(self.imports) if self.imports else ""),
                        *map(
                            str,
                            sorted(self.code_blocks, key=lambda x: x.order),
                        ),
                    ],
                )
            )
            + "\n"
        ).replace("\t", "    ")

    def add_code_block(
        self, code_block: Union["CodeBlock", str], **kwargs
    ) -> "CodeFile":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block, **kwargs)

        self.code_blocks.append(code_block)
        return self
