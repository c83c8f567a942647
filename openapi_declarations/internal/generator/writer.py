import logging
import os
from typing import Dict, List

from ..types.models import ApiInfo, CodeFile, Declaration, Declarations
from ..utils.naming import to_camel_case
from .templates import templates

logger = logging.getLogger(__name__)


class ModuleWriter:
    """Сборка одного Python модуля из накопленных объявлений"""

    def __init__(self, declarations: Declarations, info: ApiInfo = None):
        self.declarations = declarations
        self.info = info or ApiInfo()

    def render(self, file_name: str = "api_types.py") -> CodeFile:
        """
        Порядок блоков в модуле:
        импорты, общий код, enum, модели и алиасы в порядке зависимостей,
        model_rebuild(), клиенты и общий ApiClient.
        """
        code_file = CodeFile(
            file_name=file_name,
            docstring=self._module_docstring(),
            imports=[templates.imports],
        )
        code_file.add_code_block(templates.runtime, order=0)

        blocks = [d.source_text for d in self.declarations.enums]
        ordered = self.ordered_declarations()
        blocks.extend(d.source_text for d in ordered)

        rebuilds = [
            f"{d.name}.model_rebuild()"
            for d in ordered
            if d.source_text.startswith("class ")
        ]
        if rebuilds:
            blocks.append("\n".join(rebuilds))

        blocks.extend(d.source_text for d in self.declarations.clients)
        blocks.append(self._api_client())

        for order, block in enumerate(blocks, start=1):
            code_file.add_code_block(block, order=order)

        return code_file

    def write(self, output_path: str) -> str:
        """Запись модуля на диск, недостающие директории создаются"""
        code_file = self.render(os.path.basename(output_path) or "api_types.py")

        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(str(code_file))

        logger.debug("Written %s", output_path)
        return output_path

    def ordered_declarations(self) -> List[Declaration]:
        """
        Модели и алиасы так, чтобы зависимости шли раньше зависимых.

        Ссылки в аннотациях ленивые и досчитываются в model_rebuild(),
        поэтому при циклах их порядок может нарушаться. Базовые классы
        allOf нарушать нельзя: они нужны уже при создании подкласса.
        """
        by_name: Dict[str, Declaration] = {}
        for declaration in self.declarations.structural + self.declarations.aliases:
            by_name.setdefault(declaration.name, declaration)

        preferred = self._topological(by_name.values(), by_name, "dependency_names")
        return self._topological(preferred, by_name, "base_names")

    @staticmethod
    def _topological(
        declarations, by_name: Dict[str, Declaration], edges: str
    ) -> List[Declaration]:
        ordered = []
        visited = set()

        def visit(declaration: Declaration):
            if declaration.name in visited:
                return
            # Отмечаем до обхода зависимостей, чтобы не зациклиться
            visited.add(declaration.name)

            for dependency in getattr(declaration, edges):
                if dependency in by_name:
                    visit(by_name[dependency])

            ordered.append(declaration)

        for declaration in declarations:
            visit(declaration)

        return ordered

    def _api_client(self) -> str:
        names = []
        for declaration in self.declarations.clients:
            if declaration.name not in names:
                names.append(declaration.name)

        assignments = [
            f"        self.{to_camel_case(name)} = {name}(base_url, client)"
            for name in names
        ]

        return templates.api_client.format(
            client_assignments="\n".join(assignments) or "        pass"
        )

    def _module_docstring(self) -> str:
        text = f"{self.info.title} {self.info.version}".strip()
        text += "\n\nСгенерировано openapi-declarations, не редактировать вручную.\n"

        return text.replace("\\", "\\\\").replace('"', '\\"')
