import argparse
import logging
import os
import sys
from typing import List, Optional

from openapi_declarations.config import OpenApiConfig
from openapi_declarations.generator import ApiClientGenerator
from openapi_declarations.internal.generator.writer import ModuleWriter
from openapi_declarations.loader import load_spec


def _generate_module(config: OpenApiConfig) -> str:
    """Загрузка спецификации, генерация объявлений и запись модуля"""
    print(f"🚀 Генерация объявлений из {config.url}")

    print("📥 Загрузка OpenAPI спецификации...")
    openapi_spec = load_spec(config.url)

    print("⚙️ Генерация кода...")
    generator = ApiClientGenerator(openapi_spec)
    declarations = generator.generate()

    print(
        f"📦 Моделей: {len(declarations.structural)}, "
        f"алиасов: {len(declarations.aliases)}, "
        f"enum: {len(declarations.enums)}, "
        f"клиентов: {len(declarations.clients)}"
    )

    print(f"💾 Сохранение в {config.output}...")
    return ModuleWriter(declarations, generator.parse().info).write(config.output)


def generate(argv: Optional[List[str]] = None):
    """Команда генерации модуля объявлений из OpenAPI спецификации"""
    parser = argparse.ArgumentParser(
        description="Генерация Python объявлений и клиентов из OpenAPI"
    )
    parser.add_argument(
        "url", nargs="?", type=str, help="URL или путь к OpenAPI спецификации"
    )
    parser.add_argument(
        "output", nargs="?", type=str, help="Путь к генерируемому модулю"
    )
    parser.add_argument(
        "--init-config", action="store_true", help="Создать конфиг файл openapi.toml"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Подробный вывод (DEBUG)"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    # Аргументы переопределяют openapi.toml из текущей директории
    file_config = OpenApiConfig.from_file()
    if file_config:
        print("📋 Используется конфиг из openapi.toml")
    config = (file_config or OpenApiConfig()).merge_with_args(args)

    if args.init_config:
        config.save_to_file()
        print("✅ Создан конфиг файл openapi.toml")
        return

    try:
        output_path = _generate_module(config)
    except Exception as e:
        print(f"❌ Ошибка генерации: {e}", file=sys.stderr)
        sys.exit(1)

    print("✅ Генерация завершена успешно!")
    print(f"📦 Модуль создан: {os.path.abspath(output_path)}")


if __name__ == "__main__":
    generate()
