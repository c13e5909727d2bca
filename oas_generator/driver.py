"""
Generator driver: parse, transform, generate and write.

Backends are looked up by language key in a ``GeneratorRegistry``. Every
requested backend gets its own copy of the parsed document, and nothing is
written until all backends have produced their files.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from oas_generator.config import GeneratorConfig
from oas_generator.errors import GeneratorNotFoundError
from oas_generator.parser.oas_parser import OASParser, OpenApiDocument
from oas_generator.parser.transforms import TransformPipeline
from oas_generator.rust import RustGenerator
from oas_generator.typescript import TypeScriptGenerator
from oas_generator.utils.file_utils import FileInfo, resolve_output_paths, write_files_to_disk

logger = logging.getLogger(__name__)


class LanguageGenerator(Protocol):
    language: str

    def generate_files(self, document: OpenApiDocument) -> list[FileInfo]: ...


GeneratorFactory = Callable[[GeneratorConfig], LanguageGenerator]


class GeneratorRegistry:
    """Maps language keys to backend factories."""

    def __init__(self) -> None:
        self._factories: dict[str, GeneratorFactory] = {}

    def register(self, language: str, factory: GeneratorFactory) -> None:
        self._factories[language.lower()] = factory

    def available(self) -> list[str]:
        return sorted(self._factories)

    def get(self, language: str, config: GeneratorConfig) -> LanguageGenerator:
        """Instantiate the backend registered under ``language``.

        Raises:
            GeneratorNotFoundError: If no backend is registered under the key.
        """
        factory = self._factories.get(language.strip().lower())
        if factory is None:
            raise GeneratorNotFoundError(language, self.available())
        return factory(config)


def default_registry() -> GeneratorRegistry:
    registry = GeneratorRegistry()
    registry.register("typescript", TypeScriptGenerator)
    registry.register("ts", TypeScriptGenerator)
    registry.register("rust", RustGenerator)
    return registry


class GeneratorDriver:
    """Runs the parse, transform, generate and write steps for a set of languages."""

    def __init__(
        self,
        registry: GeneratorRegistry | None = None,
        config: GeneratorConfig | None = None,
        pipeline: TransformPipeline | None = None,
        parser: OASParser | None = None,
    ) -> None:
        self.registry = registry or default_registry()
        self.config = config or GeneratorConfig()
        self.pipeline = pipeline or TransformPipeline.default()
        self.parser = parser or OASParser()

    def generate(self, input_path: str | Path, output_dir: str | Path, languages: list[str]) -> dict[Path, bytes]:
        """Parse ``input_path`` and generate every requested language into ``output_dir``.

        Returns:
            The written files, keyed by absolute path.

        Raises:
            InputError: If the document cannot be read, parsed or validated.
            GeneratorNotFoundError: If a language has no registered backend.
            EmissionError: If a backend fails to render its files.
            FileSystemWriteError: If a file cannot be written.
        """
        document = self.parser.parse_file(input_path)
        return self.generate_document(document, output_dir, languages)

    def generate_document(
        self,
        document: OpenApiDocument,
        output_dir: str | Path,
        languages: list[str],
    ) -> dict[Path, bytes]:
        """Generate from an already parsed document; ``document`` itself is left untouched."""
        output_dir = Path(output_dir)
        generators = self._resolve_generators(languages)
        per_language_dirs = len(generators) > 1

        all_files: dict[Path, bytes] = {}
        for generator in generators:
            working_copy = self.pipeline.apply(copy.deepcopy(document))
            files = generator.generate_files(working_copy)
            target_dir = output_dir / generator.language if per_language_dirs else output_dir
            all_files.update(resolve_output_paths(files, target_dir))
            logger.info("Generated %d %s files", len(files), generator.language)

        write_files_to_disk(all_files)
        return all_files

    def _resolve_generators(self, languages: list[str]) -> list[LanguageGenerator]:
        if not languages:
            raise GeneratorNotFoundError("", self.registry.available())
        generators: list[LanguageGenerator] = []
        seen: set[str] = set()
        for language in languages:
            generator = self.registry.get(language, self.config)
            if generator.language in seen:
                continue
            seen.add(generator.language)
            generators.append(generator)
        return generators
