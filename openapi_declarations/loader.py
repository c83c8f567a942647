"""
Загрузка OpenAPI спецификации по URL или из файла
"""

import json
import logging
from typing import Any, Dict

import httpx

logger = logging.getLogger(__name__)


class SpecLoadError(Exception):
    """Не удалось получить или прочитать спецификацию"""


def load_spec(url_or_path: str, timeout: float = 30.0) -> Dict[str, Any]:
    """
    Загрузка спецификации.

    Адреса http(s) загружаются через httpx, все остальное читается
    как локальный файл в UTF-8. Результат должен быть JSON объектом.
    """
    if url_or_path.startswith(("http://", "https://")):
        text = _fetch(url_or_path, timeout)
    else:
        try:
            with open(url_or_path, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise SpecLoadError(f"Не удалось прочитать файл {url_or_path}: {e}") from e

    try:
        spec = json.loads(text)
    except json.JSONDecodeError as e:
        raise SpecLoadError(f"Некорректный JSON в {url_or_path}: {e}") from e

    if not isinstance(spec, dict):
        raise SpecLoadError(f"Спецификация в {url_or_path} должна быть JSON объектом")

    logger.debug("Loaded spec from %s", url_or_path)
    return spec


def _fetch(url: str, timeout: float) -> str:
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
    except httpx.HTTPError as e:
        raise SpecLoadError(f"Ошибка загрузки {url}: {e}") from e

    if not response.is_success:
        raise SpecLoadError(
            f"Ошибка загрузки {url}: HTTP {response.status_code} {response.reason_phrase}"
        )

    return response.text
