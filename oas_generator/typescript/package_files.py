"""package.json, tsconfig files and README for a generated TypeScript package."""

from __future__ import annotations

import json
from typing import Any, Final

from oas_generator.ast import Class
from oas_generator.config import PackageConfig
from oas_generator.constants import DEFAULT_PACKAGE_VERSION, FileCategory, TypeScriptModule
from oas_generator.parser.oas_parser import OpenApiDocument
from oas_generator.templating.filters import ensure_semver
from oas_generator.templating.template_engine import TemplateEngine
from oas_generator.utils.file_utils import FileInfo
from oas_generator.utils.string_case import spinalcase

README_TEMPLATE: Final = "README.md.j2"
DEFAULT_PACKAGE_NAME: Final = "api-client"
TYPESCRIPT_VERSION: Final = "^5.4.0"
_SOURCE_GLOBS: Final = ("index.ts", "apis/**/*.ts", "models/**/*.ts", "runtime/**/*.ts")


def _json_document(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2) + "\n"


def _example_method(class_node: Class) -> str | None:
    for method in class_node.methods:
        if method.name != "constructor" and not method.name.endswith("Raw"):
            return method.name
    return None


class PackageFileGenerator:
    def __init__(self, config: PackageConfig, engine: TemplateEngine) -> None:
        self.config = config
        self.engine = engine

    def package_name(self, document: OpenApiDocument) -> str:
        return self.config.full_package_name(spinalcase(document.info.title) or DEFAULT_PACKAGE_NAME)

    def generate(self, document: OpenApiDocument, api_classes: list[Class], base_path: str) -> list[FileInfo]:
        """Build the project files; ``tsconfig.esm.json`` only when ESM output is enabled."""
        files = [
            FileInfo.from_text("package.json", self.package_json(document), FileCategory.PROJECT_FILES),
            FileInfo.from_text("tsconfig.json", self.tsconfig(), FileCategory.PROJECT_FILES),
        ]
        if self.config.generate_esm_config:
            files.append(FileInfo.from_text("tsconfig.esm.json", self.tsconfig_esm(), FileCategory.PROJECT_FILES))
        files.append(
            FileInfo.from_text("README.md", self.readme(document, api_classes, base_path), FileCategory.PROJECT_FILES)
        )
        return files

    def package_json(self, document: OpenApiDocument) -> str:
        info = document.info
        manifest: dict[str, Any] = {
            "name": self.package_name(document),
            "version": ensure_semver(info.version) if info.version else DEFAULT_PACKAGE_VERSION,
            "description": info.description or f"TypeScript client for {info.title}",
            "main": "dist/index.js",
            "types": "dist/index.d.ts",
        }
        if self.config.generate_esm_config:
            manifest["module"] = "dist/esm/index.js"
        manifest["files"] = ["dist"]
        if self.config.include_build_scripts:
            build = "tsc"
            if self.config.generate_esm_config:
                build = "tsc && tsc -p tsconfig.esm.json"
            manifest["scripts"] = {"build": build, "prepare": "npm run build"}
        manifest["devDependencies"] = {"typescript": TYPESCRIPT_VERSION}
        return _json_document(manifest)

    def tsconfig(self) -> str:
        target = self.config.typescript_target
        return _json_document(
            {
                "compilerOptions": {
                    "target": target,
                    "module": self.config.typescript_module.value,
                    "moduleResolution": "node",
                    "lib": [target, "dom"],
                    "declaration": True,
                    "strict": True,
                    "esModuleInterop": True,
                    "skipLibCheck": True,
                    "rootDir": ".",
                    "outDir": "dist",
                },
                "include": list(_SOURCE_GLOBS),
                "exclude": ["dist", "node_modules"],
            }
        )

    @staticmethod
    def tsconfig_esm() -> str:
        return _json_document(
            {
                "extends": "./tsconfig.json",
                "compilerOptions": {
                    "module": TypeScriptModule.ESNEXT.value,
                    "outDir": "dist/esm",
                },
            }
        )

    def readme(self, document: OpenApiDocument, api_classes: list[Class], base_path: str) -> str:
        example_api = api_classes[0] if api_classes else None
        return self.engine.render_template(
            README_TEMPLATE,
            {
                "title": document.info.title,
                "version": document.info.version,
                "description": document.info.description,
                "package_name": self.package_name(document),
                "base_path": base_path,
                "example_api": example_api,
                "example_method": _example_method(example_api) if example_api else None,
            },
        )
