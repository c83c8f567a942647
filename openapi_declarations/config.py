"""
Конфигурация генератора объявлений
"""

import logging
import os
from typing import Optional
import toml
from dataclasses import dataclass

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "openapi.toml"
DEFAULT_SPEC_URL = "https://fakerestapi.azurewebsites.net/swagger/v1/swagger.json"
DEFAULT_OUTPUT = "./generated/api_types.py"


@dataclass
class OpenApiConfig:
    """Конфигурация генератора: откуда брать спецификацию и куда писать модуль"""

    url: Optional[str] = DEFAULT_SPEC_URL
    output: Optional[str] = DEFAULT_OUTPUT

    @classmethod
    def from_file(
        cls, config_path: str = CONFIG_FILE_NAME, search_dir: str = None
    ) -> Optional["OpenApiConfig"]:
        """Загрузка конфигурации из файла"""
        # Если указана директория для поиска, ищем конфиг там
        if search_dir and os.path.isdir(search_dir):
            config_in_dir = os.path.join(search_dir, CONFIG_FILE_NAME)
            if os.path.exists(config_in_dir):
                config_path = config_in_dir

        if not os.path.exists(config_path):
            return None

        try:
            config_data = toml.load(config_path)
        except (OSError, toml.TomlDecodeError) as e:
            logger.warning("Failed to read %s: %s", config_path, e)
            return None

        return cls(
            url=config_data.get("url") or DEFAULT_SPEC_URL,
            output=config_data.get("output") or DEFAULT_OUTPUT,
        )

    def save_to_file(self, config_path: str = CONFIG_FILE_NAME) -> None:
        """Сохранение конфигурации в файл"""
        config_data = {
            "url": self.url,
            "output": self.output,
        }

        with open(config_path, "w", encoding="utf-8") as f:
            toml.dump(config_data, f)

    def merge_with_args(self, args) -> "OpenApiConfig":
        """Объединение с аргументами командной строки"""
        return OpenApiConfig(
            url=args.url or self.url,
            output=args.output or self.output,
        )
