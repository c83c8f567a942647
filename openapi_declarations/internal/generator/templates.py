class Templates:
    """Шаблоны для генерации модуля с объявлениями"""

    imports = """from __future__ import annotations

import datetime
import json
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Required, TypedDict, Union
from urllib.parse import quote, urlencode

import httpx
from pydantic import BaseModel, ConfigDict, Field"""

    runtime = """class ApiError(Exception):
    \"\"\"Ответ API с неуспешным статусом\"\"\"

    def __init__(self, status_code: int, response_text: str) -> None:
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(f"API error: {status_code} {response_text}")


class RequestOptions(TypedDict, total=False):
    \"\"\"
    Дополнительные параметры запроса httpx.

    Cookie задаются на внедряемом httpx.AsyncClient.
    \"\"\"

    timeout: Any
    auth: Any
    follow_redirects: bool
    extensions: Dict[str, Any]


def _to_text(value: Any) -> str:
    \"\"\"Строковое представление значения для пути и query\"\"\"
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)


def _query_pairs(key: str, value: Any) -> List[tuple]:
    \"\"\"Пары query строки, для списков ключ повторяется\"\"\"
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [(key, _to_text(item)) for item in value if item is not None]
    return [(key, _to_text(value))]


def _to_jsonable(value: Any) -> Any:
    \"\"\"Подготовка тела запроса к сериализации в JSON\"\"\"
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value


class BaseApi:
    \"\"\"Базовый класс клиентов API\"\"\"

    def __init__(
        self, base_url: str = "", client: Optional[httpx.AsyncClient] = None
    ) -> None:
        self.base_url = base_url
        self._client = client

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(method, url, **kwargs)

        async with httpx.AsyncClient() as client:
            return await client.request(method, url, **kwargs)"""

    api_client = """class ApiClient:
    \"\"\"Клиент со всеми группами эндпоинтов\"\"\"

    def __init__(
        self, base_url: str = "", client: Optional[httpx.AsyncClient] = None
    ) -> None:
{client_assignments}"""

    response_handling = """response = await self._send(**request_kwargs)
content_type = response.headers.get("Content-Type", "")

if not response.is_success:
    raise ApiError(response.status_code, response.text)

if "json" in content_type:
    return response.json()
return response.text"""


templates = Templates()
