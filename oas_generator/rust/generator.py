"""
Rust language backend.

Emits serde model types for every component schema plus the crate files that
make them buildable. API clients are not generated for Rust.
"""

from __future__ import annotations

import logging
from typing import Any, Final

from oas_generator.config import GeneratorConfig
from oas_generator.constants import FileCategory
from oas_generator.parser.oas_parser import OpenApiDocument
from oas_generator.rust.type_mapping import RustModel, build_model
from oas_generator.templating.template_engine import TemplateEngine
from oas_generator.utils.file_utils import FileInfo, check_unique_filenames
from oas_generator.utils.string_case import rust_snake_case

logger = logging.getLogger(__name__)

DEFAULT_CRATE_NAME: Final = "api_client"
RUST_EXTENSION: Final = ".rs"


class RustGenerator:
    """Backend registered under ``rust``."""

    language = "rust"

    def __init__(self, config: GeneratorConfig | None = None, template_engine: TemplateEngine | None = None) -> None:
        self.config = config or GeneratorConfig()
        self.template_engine = template_engine or TemplateEngine()

    def crate_name(self, document: OpenApiDocument) -> str:
        name = self.config.package_config.package_name or document.info.title
        return rust_snake_case(name) or DEFAULT_CRATE_NAME

    def build_models(self, document: OpenApiDocument) -> list[RustModel]:
        models = [build_model(name, schema, document.schemas) for name, schema in document.schemas.items()]
        return sorted(models, key=lambda model: model.rust_file_name)

    def generate_files(self, document: OpenApiDocument) -> list[FileInfo]:
        """Generate the model modules, ``models/mod.rs``, ``lib.rs``, ``Cargo.toml`` and ``README.md``."""
        models = self.build_models(document)
        info = document.info
        context: dict[str, Any] = {
            "title": info.title,
            "version": info.version,
            "description": info.description,
            "crate_name": self.crate_name(document),
            "crate_description": info.description or f"Rust models for {info.title}",
            "models": models,
        }

        files = []
        for model in models:
            content = self.template_engine.render_template("rust/model.rs.j2", {**context, "model": model})
            files.append(FileInfo.from_text(f"{model.rust_file_name}{RUST_EXTENSION}", content, FileCategory.MODELS))
        files.append(
            FileInfo.from_text(
                f"mod{RUST_EXTENSION}",
                self.template_engine.render_template("rust/mod.rs.j2", context),
                FileCategory.MODELS,
            )
        )

        project_templates = {
            f"lib{RUST_EXTENSION}": "rust/lib.rs.j2",
            "Cargo.toml": "rust/Cargo.toml.j2",
            "README.md": "rust/README.md.j2",
        }
        for filename, template_name in project_templates.items():
            content = self.template_engine.render_template(template_name, context)
            files.append(FileInfo.from_text(filename, content, FileCategory.PROJECT_FILES))

        check_unique_filenames(files)

        logger.debug("Generated %d Rust model modules for %s", len(models), info.title)
        return files
