"""Whole-document TypeScript file generation."""

import json

import pytest

from oas_generator.config import FileConfig, GeneratorConfig, PackageConfig
from oas_generator.constants import HTTP_METHODS, FileCategory, NamingConvention
from oas_generator.errors import EmissionError
from oas_generator.parser import OpenApiDocument
from oas_generator.typescript import TypeScriptGenerator
from oas_generator.typescript.file_generator import TypeScriptFileGenerator, base_path
from oas_generator.utils.file_utils import FileInfo, check_unique_filenames


def by_path(files: list[FileInfo]) -> dict[str, str]:
    return {file.relative_path.as_posix(): file.text for file in files}


@pytest.fixture
def petstore_files(petstore_document: OpenApiDocument) -> dict[str, str]:
    return by_path(TypeScriptFileGenerator().generate(petstore_document))


class TestLayout:
    def test_file_set(self, petstore_files: dict[str, str]) -> None:
        assert sorted(petstore_files) == [
            "apis/PetApi.ts",
            "apis/StoreApi.ts",
            "index.ts",
            "models/category.ts",
            "models/pet-status.ts",
            "models/pet.ts",
            "runtime/runtime.ts",
        ]

    def test_generator_wrapper(self, petstore_document: OpenApiDocument) -> None:
        generator = TypeScriptGenerator()
        assert generator.language == "typescript"
        assert len(generator.generate_files(petstore_document)) == 7

    def test_naming_convention_applies_to_models(self, petstore_document: OpenApiDocument) -> None:
        config = GeneratorConfig(file_config=FileConfig(naming_convention=NamingConvention.SNAKE))
        files = by_path(TypeScriptFileGenerator(config).generate(petstore_document))
        assert "models/pet_status.ts" in files
        assert "import type { PetStatus } from './pet_status';" in files["models/pet.ts"]

    def test_index_exports_in_group_order(self, petstore_files: dict[str, str]) -> None:
        assert petstore_files["index.ts"] == (
            "// DO NOT EDIT - This file is automatically generated\n"
            "\n"
            "export * from './runtime/runtime';\n"
            "export * from './models/category';\n"
            "export * from './models/pet';\n"
            "export * from './models/pet-status';\n"
            "export * from './apis/PetApi';\n"
            "export * from './apis/StoreApi';\n"
        )


class TestModelFiles:
    def test_interface_with_imports(self, petstore_files: dict[str, str]) -> None:
        assert petstore_files["models/pet.ts"] == (
            "// DO NOT EDIT - This file is automatically generated\n"
            "\n"
            "import type { Category } from './category';\n"
            "import type { PetStatus } from './pet-status';\n"
            "\n"
            "export interface Pet {\n"
            "  id?: number;\n"
            "  name: string;\n"
            "  category?: Category;\n"
            "  status?: PetStatus;\n"
            "  tags?: Array<string>;\n"
            "}\n"
        )

    def test_model_without_imports(self, petstore_files: dict[str, str]) -> None:
        assert petstore_files["models/category.ts"] == (
            "// DO NOT EDIT - This file is automatically generated\n"
            "\n"
            "export interface Category { id?: number; name?: string }\n"
        )

    def test_self_reference_is_not_imported(self, make_document) -> None:
        document = make_document(
            schemas={
                "Node": {
                    "type": "object",
                    "properties": {"next": {"$ref": "#/components/schemas/Node"}},
                }
            }
        )
        files = by_path(TypeScriptFileGenerator().generate(document))
        assert "import" not in files["models/node.ts"]

    def test_reference_cycle_aliases_the_next_schema(self, make_document) -> None:
        document = make_document(
            schemas={
                "A": {"$ref": "#/components/schemas/B"},
                "B": {"$ref": "#/components/schemas/A"},
            }
        )
        files = by_path(TypeScriptFileGenerator().generate(document))
        assert "import type { B } from './b';" in files["models/a.ts"]
        assert "export type A = B;" in files["models/a.ts"]
        assert "import type { A } from './a';" in files["models/b.ts"]
        assert "export type B = A;" in files["models/b.ts"]


class TestApiFiles:
    def test_api_file_structure(self, petstore_files: dict[str, str]) -> None:
        content = petstore_files["apis/PetApi.ts"]
        assert content.startswith("// DO NOT EDIT - This file is automatically generated\n\nimport {\n  BaseAPI,\n")
        assert "import type { Pet } from '../models/pet';\n" in content
        assert "/** PetApi - operations tagged 'pet' */\nexport class PetApi extends BaseAPI {\n" in content
        assert "  constructor(configuration?: Configuration) {\n    super(configuration);\n  }\n" in content
        assert content.endswith("\n}\n")

    def test_raw_method_signature_breaks_at_width(self, petstore_files: dict[str, str]) -> None:
        assert (
            "  async addPetRaw(\n"
            "    body: Pet,\n"
            "    initOverrides?: RequestInit | InitOverrideFunction,\n"
            "  ): Promise<JSONApiResponse<Pet>> {\n"
        ) in petstore_files["apis/PetApi.ts"]

    def test_convenience_method(self, petstore_files: dict[str, str]) -> None:
        assert (
            "    return (await this.getPetByIdRaw(petId, initOverrides)).value();\n  }\n"
            in petstore_files["apis/PetApi.ts"]
        )

    def test_methods_are_documented(self, petstore_files: dict[str, str]) -> None:
        assert (
            "  /**\n"
            "   * Add a new pet to the store\n"
            "   * @throws {ResponseError} when the server answers with an error status\n"
            "   */\n"
            "  async addPetRaw("
        ) in petstore_files["apis/PetApi.ts"]

    def test_store_api_uses_auth(self, petstore_files: dict[str, str]) -> None:
        content = petstore_files["apis/StoreApi.ts"]
        assert "headerParameters['Authorization'] = `Bearer ${token}`;" in content
        assert "Promise<{ [key: string]: number }>" in content


class TestRuntimeFile:
    def test_runtime_base_path(self, petstore_files: dict[str, str]) -> None:
        runtime = petstore_files["runtime/runtime.ts"]
        assert "export const BASE_PATH = 'https://petstore.example.com/v1'.replace(/\\/+$/, '');" in runtime
        assert "// Petstore 1.0.0" in runtime
        for name in ("class BaseAPI", "class ResponseError", "class JSONApiResponse", "class VoidApiResponse"):
            assert name in runtime

    def test_default_base_path(self, make_document) -> None:
        assert base_path(make_document()) == "http://localhost"

    def test_every_parsed_verb_is_an_http_method(self, petstore_files: dict[str, str]) -> None:
        runtime = petstore_files["runtime/runtime.ts"]
        union_line = next(line for line in runtime.splitlines() if line.startswith("export type HTTPMethod ="))
        for verb in HTTP_METHODS:
            assert f"'{verb.upper()}'" in union_line

    def test_trace_operation_type_checks_against_runtime(self, make_document) -> None:
        document = make_document(
            paths={"/echo": {"trace": {"operationId": "echo", "responses": {"200": {"description": "ok"}}}}}
        )
        files = by_path(TypeScriptFileGenerator().generate(document))
        assert "method: 'TRACE'," in files["apis/DefaultApi.ts"]
        assert "| 'TRACE';" in files["runtime/runtime.ts"]


class TestPackageFiles:
    @pytest.fixture
    def package_config(self) -> PackageConfig:
        return PackageConfig(generate_package=True, scope="acme", generate_esm_config=True)

    def test_package_files(self, petstore_document: OpenApiDocument, package_config: PackageConfig) -> None:
        config = GeneratorConfig(package_config=package_config)
        files = by_path(TypeScriptFileGenerator(config).generate(petstore_document))

        manifest = json.loads(files["package.json"])
        assert manifest["name"] == "@acme/petstore"
        assert manifest["version"] == "1.0.0"
        assert manifest["description"] == "Sample pet store"
        assert manifest["module"] == "dist/esm/index.js"
        assert manifest["scripts"]["build"] == "tsc && tsc -p tsconfig.esm.json"

        tsconfig = json.loads(files["tsconfig.json"])
        assert tsconfig["compilerOptions"]["strict"] is True
        assert json.loads(files["tsconfig.esm.json"])["extends"] == "./tsconfig.json"

        readme = files["README.md"]
        assert "npm install @acme/petstore" in readme
        assert "PetApi" in readme

    def test_no_package_files_by_default(self, petstore_files: dict[str, str]) -> None:
        assert "package.json" not in petstore_files


class TestUniqueness:
    def test_duplicate_filenames_raise(self) -> None:
        files = [
            FileInfo.from_text("a.ts", "", FileCategory.MODELS),
            FileInfo.from_text("a.ts", "", FileCategory.APIS),
            FileInfo.from_text("a.ts", "", FileCategory.MODELS),
        ]
        with pytest.raises(EmissionError, match="duplicate models filename"):
            check_unique_filenames(files)

    def test_colliding_model_names_raise(self, make_document) -> None:
        document = make_document(schemas={"PetStatus": {"type": "string"}, "Pet_Status": {"type": "string"}})
        with pytest.raises(EmissionError):
            TypeScriptFileGenerator().generate(document)
