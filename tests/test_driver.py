"""Backend registry and the parse/transform/generate/write driver."""

from pathlib import Path

import pytest

from oas_generator.config import GeneratorConfig
from oas_generator.constants import FileCategory
from oas_generator.driver import GeneratorDriver, GeneratorRegistry, default_registry
from oas_generator.errors import EXIT_UNKNOWN_LANGUAGE, EmissionError, FileSystemWriteError, GeneratorNotFoundError
from oas_generator.rust import RustGenerator
from oas_generator.typescript import TypeScriptGenerator
from oas_generator.utils.file_utils import FileInfo


class FailingGenerator:
    language = "broken"

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config

    def generate_files(self, document) -> list[FileInfo]:
        msg = "template rendering failed"
        raise EmissionError(msg, element="broken.j2")


class StubGenerator:
    language = "stub"

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config

    def generate_files(self, document) -> list[FileInfo]:
        return [FileInfo.from_text("stub.txt", document.info.title, FileCategory.PROJECT_FILES)]


class TestRegistry:
    def test_default_registry(self) -> None:
        registry = default_registry()
        assert registry.available() == ["rust", "ts", "typescript"]
        assert isinstance(registry.get("TypeScript", GeneratorConfig()), TypeScriptGenerator)
        assert isinstance(registry.get(" rust ", GeneratorConfig()), RustGenerator)

    def test_unknown_language(self) -> None:
        with pytest.raises(GeneratorNotFoundError) as exc_info:
            default_registry().get("cobol", GeneratorConfig())
        error = exc_info.value
        assert error.language == "cobol"
        assert error.exit_code == EXIT_UNKNOWN_LANGUAGE
        assert "available: rust, ts, typescript" in str(error)

    def test_register_lowercases_keys(self) -> None:
        registry = GeneratorRegistry()
        registry.register("Stub", StubGenerator)
        assert registry.available() == ["stub"]


class TestGeneratorDriver:
    def test_single_language_writes_into_output_dir(self, petstore_document, tmp_path: Path) -> None:
        written = GeneratorDriver().generate_document(petstore_document, tmp_path, ["typescript"])
        assert tmp_path / "index.ts" in written
        assert (tmp_path / "apis" / "PetApi.ts").read_bytes() == written[tmp_path / "apis" / "PetApi.ts"]

    def test_multiple_languages_get_subdirectories(self, petstore_document, tmp_path: Path) -> None:
        GeneratorDriver().generate_document(petstore_document, tmp_path, ["typescript", "rust"])
        assert (tmp_path / "typescript" / "index.ts").is_file()
        assert (tmp_path / "rust" / "Cargo.toml").is_file()
        assert (tmp_path / "rust" / "models" / "pet.rs").is_file()

    def test_aliases_are_deduplicated(self, petstore_document, tmp_path: Path) -> None:
        GeneratorDriver().generate_document(petstore_document, tmp_path, ["typescript", "ts"])
        assert (tmp_path / "index.ts").is_file()
        assert not (tmp_path / "typescript").exists()

    def test_document_is_not_mutated(self, make_document, tmp_path: Path) -> None:
        document = make_document(schemas={"pet_status": {"type": "string", "nullable": True}})
        GeneratorDriver().generate_document(document, tmp_path, ["typescript"])
        assert document.schemas == {"pet_status": {"type": "string", "nullable": True}}

    def test_no_languages(self, petstore_document, tmp_path: Path) -> None:
        with pytest.raises(GeneratorNotFoundError):
            GeneratorDriver().generate_document(petstore_document, tmp_path, [])

    def test_unknown_language_writes_nothing(self, petstore_document, tmp_path: Path) -> None:
        with pytest.raises(GeneratorNotFoundError):
            GeneratorDriver().generate_document(petstore_document, tmp_path, ["typescript", "cobol"])
        assert list(tmp_path.iterdir()) == []

    def test_emission_failure_writes_nothing(self, petstore_document, tmp_path: Path) -> None:
        registry = default_registry()
        registry.register("broken", FailingGenerator)
        driver = GeneratorDriver(registry=registry)
        with pytest.raises(EmissionError, match=r"\[broken.j2\]"):
            driver.generate_document(petstore_document, tmp_path, ["typescript", "broken"])
        assert list(tmp_path.iterdir()) == []

    def test_write_failure(self, petstore_document, tmp_path: Path) -> None:
        blocker = tmp_path / "out"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(FileSystemWriteError):
            GeneratorDriver().generate_document(petstore_document, blocker, ["typescript"])

    def test_custom_registry(self, petstore_document, tmp_path: Path) -> None:
        registry = GeneratorRegistry()
        registry.register("stub", StubGenerator)
        GeneratorDriver(registry=registry).generate_document(petstore_document, tmp_path, ["stub"])
        assert (tmp_path / "stub.txt").read_text(encoding="utf-8") == "Petstore"

    def test_generate_from_file(self, petstore_spec, write_spec, tmp_path: Path) -> None:
        spec_path = write_spec(petstore_spec, "petstore.yaml")
        written = GeneratorDriver().generate(spec_path, tmp_path / "client", ["typescript"])
        assert tmp_path / "client" / "models" / "pet-status.ts" in written
