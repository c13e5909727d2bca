"""
Whole-document orchestration for the TypeScript backend.

Lowers every component schema to a model file, every operation tag to an API
class file, and adds the runtime module, the root index and (optionally) the
package files. Nothing is written here; the driver owns the file system.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from oas_generator.ast import Class, Declaration, Import, ImportSpecifier
from oas_generator.config import GeneratorConfig
from oas_generator.constants import DEFAULT_BASE_PATH, DO_NOT_EDIT_HEADER, TS_EXTENSION, FileCategory
from oas_generator.emission.pretty_printer import EmissionContext, TsPrettyPrinter
from oas_generator.parser.oas_parser import OpenApiDocument
from oas_generator.templating.template_engine import TemplateEngine
from oas_generator.typescript.api_class_builder import ApiClassBuilder
from oas_generator.typescript.package_files import PackageFileGenerator
from oas_generator.typescript.schema_mapper import SchemaContext, SchemaMapper
from oas_generator.utils.file_utils import FileInfo, check_unique_filenames
from oas_generator.utils.string_case import apply_naming_convention

logger = logging.getLogger(__name__)

RUNTIME_FILENAME = f"runtime{TS_EXTENSION}"
INDEX_FILENAME = f"index{TS_EXTENSION}"
API_CLASS_TEMPLATE = "api/api_class.j2"
RUNTIME_TEMPLATE = "runtime/runtime.j2"


def base_path(document: OpenApiDocument) -> str:
    """Default server URL: the first server entry, else ``http://localhost``."""
    if document.servers and document.servers[0].url:
        return document.servers[0].url
    return DEFAULT_BASE_PATH


def module_base(filename: str) -> str:
    return filename.removesuffix(TS_EXTENSION)


class TypeScriptFileGenerator:
    """Produces every TypeScript file for one document."""

    def __init__(self, config: GeneratorConfig | None = None, engine: TemplateEngine | None = None) -> None:
        self.config = config or GeneratorConfig()
        context = EmissionContext(max_line_width=self.config.file_config.max_line_width)
        self.printer = TsPrettyPrinter(context)
        self.engine = engine or TemplateEngine(context=context)
        self.mapper = SchemaMapper()
        self.api_builder = ApiClassBuilder(self.mapper, printer=self.printer)
        self.package_files = PackageFileGenerator(self.config.package_config, self.engine)

    def generate(self, document: OpenApiDocument) -> list[FileInfo]:
        """Generate all files for ``document``.

        Returns:
            Model files, API files, the runtime file, the index and the
            package files, each group in sorted order.

        Raises:
            EmissionError: If two files of one category share a filename or a
                template fails to render.
        """
        context = SchemaContext(document.schemas)
        declarations = self.build_declarations(document, context)
        model_modules = {decl.name: self.model_module_name(decl.name) for decl in declarations}

        model_files = [self.model_file(decl, model_modules) for decl in declarations]
        api_classes = self.build_api_classes(document, context, model_modules)
        api_files = [self.api_file(class_node) for class_node in api_classes]
        runtime_file = self.runtime_file(document)
        index_file = self.index_file(model_files, api_files)

        files = [*model_files, *api_files, runtime_file, index_file]
        if self.config.package_config.generate_package:
            files.extend(self.package_files.generate(document, api_classes, base_path(document)))

        check_unique_filenames(files)
        logger.debug(
            "Generated %d model files, %d API files for %s",
            len(model_files),
            len(api_files),
            document.info.title,
        )
        return files

    def build_declarations(self, document: OpenApiDocument, context: SchemaContext) -> list[Declaration]:
        declarations = [self.mapper.declare(name, schema, context) for name, schema in document.schemas.items()]
        return sorted(declarations, key=lambda decl: decl.name)

    def build_api_classes(
        self,
        document: OpenApiDocument,
        context: SchemaContext,
        model_modules: dict[str, str],
    ) -> list[Class]:
        groups = self.api_builder.group_operations_by_tag(document)
        return [
            self.api_builder.build(tag, operations, document, context, model_modules)
            for tag, operations in groups.items()
        ]

    def model_module_name(self, type_name: str) -> str:
        return apply_naming_convention(type_name, self.config.file_config.naming_convention)

    def model_file(self, declaration: Declaration, model_modules: dict[str, str]) -> FileInfo:
        """Header line, blank line, imports, blank line, declaration."""
        imports = [
            Import(
                module_path=f"./{model_modules[name]}",
                specifiers=[ImportSpecifier(name)],
                is_type_only=True,
            )
            for name in sorted(declaration.referenced_names())
            if name in model_modules and name != declaration.name
        ]
        sections = [DO_NOT_EDIT_HEADER]
        if imports:
            sections.append("\n".join(self.printer.format_import(imp) for imp in imports))
        sections.append(self.printer.format_declaration(declaration))
        return FileInfo.from_text(
            f"{model_modules[declaration.name]}{TS_EXTENSION}",
            "\n\n".join(sections) + "\n",
            FileCategory.MODELS,
        )

    def api_file(self, class_node: Class) -> FileInfo:
        content = self.engine.render_template(API_CLASS_TEMPLATE, {"class_node": class_node})
        return FileInfo.from_text(f"{class_node.name}{TS_EXTENSION}", content, FileCategory.APIS)

    def runtime_file(self, document: OpenApiDocument) -> FileInfo:
        content = self.engine.render_template(
            RUNTIME_TEMPLATE,
            {
                "title": document.info.title,
                "version": document.info.version,
                "base_path": base_path(document),
            },
        )
        return FileInfo.from_text(RUNTIME_FILENAME, content, FileCategory.RUNTIME)

    @staticmethod
    def index_file(model_files: Iterable[FileInfo], api_files: Iterable[FileInfo]) -> FileInfo:
        """Re-export runtime, then models, then APIs; names sorted within each group."""
        lines = [DO_NOT_EDIT_HEADER, ""]
        lines.append(f"export * from './{FileCategory.RUNTIME.subdirectory}/{module_base(RUNTIME_FILENAME)}';")
        for category, files in ((FileCategory.MODELS, model_files), (FileCategory.APIS, api_files)):
            for name in sorted(module_base(file.filename) for file in files):
                lines.append(f"export * from './{category.subdirectory}/{name}';")
        return FileInfo.from_text(INDEX_FILENAME, "\n".join(lines) + "\n", FileCategory.PROJECT_FILES)

