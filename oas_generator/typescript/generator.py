"""TypeScript language backend."""

from __future__ import annotations

from oas_generator.config import GeneratorConfig
from oas_generator.parser.oas_parser import OpenApiDocument
from oas_generator.typescript.file_generator import TypeScriptFileGenerator
from oas_generator.utils.file_utils import FileInfo


class TypeScriptGenerator:
    """Backend registered under ``typescript`` (and ``ts``)."""

    language = "typescript"

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self.config = config or GeneratorConfig()

    def generate_files(self, document: OpenApiDocument) -> list[FileInfo]:
        # fresh mapper state per document
        return TypeScriptFileGenerator(self.config).generate(document)
