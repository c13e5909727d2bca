"""End-to-end scenarios: a small document in, generated TypeScript out."""

from pathlib import Path

import pytest

from oas_generator.ast import NULL, STRING, Interface, union_of
from oas_generator.config import FileConfig, GeneratorConfig
from oas_generator.driver import GeneratorDriver
from oas_generator.parser import TransformPipeline
from oas_generator.typescript.schema_mapper import SchemaContext, SchemaMapper

HEADER = "// DO NOT EDIT - This file is automatically generated\n\n"


def ref(name: str) -> dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def generate(document, output_dir: Path, max_line_width: int = 80) -> dict[str, str]:
    config = GeneratorConfig(file_config=FileConfig(max_line_width=max_line_width))
    written = GeneratorDriver(config=config).generate_document(document, output_dir, ["typescript"])
    return {path.relative_to(output_dir).as_posix(): content.decode("utf-8") for path, content in written.items()}


class TestMinimal:
    @pytest.fixture
    def files(self, make_document, tmp_path: Path) -> dict[str, str]:
        document = make_document(
            title="Minimal API",
            paths={"/ping": {"get": {"operationId": "ping", "responses": {"200": {"description": "OK"}}}}},
        )
        return generate(document, tmp_path, max_line_width=200)

    def test_file_set(self, files: dict[str, str], tmp_path: Path) -> None:
        assert sorted(files) == ["apis/DefaultApi.ts", "index.ts", "runtime/runtime.ts"]
        assert not (tmp_path / "models").exists()

    def test_void_methods(self, files: dict[str, str]) -> None:
        api = files["apis/DefaultApi.ts"]
        assert "async pingRaw(initOverrides?: RequestInit | InitOverrideFunction): Promise<VoidApiResponse> {" in api
        assert "async ping(initOverrides?: RequestInit | InitOverrideFunction): Promise<void> {" in api
        assert "return new VoidApiResponse(response);" in api

    def test_index(self, files: dict[str, str]) -> None:
        assert files["index.ts"] == HEADER + "export * from './runtime/runtime';\nexport * from './apis/DefaultApi';\n"


class TestModels:
    def test_enum(self, make_document, tmp_path: Path) -> None:
        document = make_document(schemas={"PetStatus": {"type": "string", "enum": ["available", "pending", "sold"]}})
        files = generate(document, tmp_path)
        assert files["models/pet-status.ts"] == HEADER + (
            "export enum PetStatus {\n"
            '  Available = "available",\n'
            '  Pending = "pending",\n'
            '  Sold = "sold",\n'
            "}\n"
        )

    def test_nullable_multi_type(self, make_document, tmp_path: Path) -> None:
        schemas = {"Person": {"type": "object", "properties": {"middle_name": {"type": ["string", "null"]}}}}
        declaration = SchemaMapper().declare("Person", schemas["Person"], SchemaContext(schemas))
        assert isinstance(declaration, Interface)
        assert declaration.properties[0].type == union_of([STRING, NULL])

        files = generate(make_document(schemas=schemas), tmp_path)
        assert files["models/person.ts"] == HEADER + "export interface Person { middle_name?: string | null }\n"

    def test_composition(self, make_document, tmp_path: Path) -> None:
        schemas = {
            "Animal": {"oneOf": [ref("Dog"), ref("Cat")]},
            "Cat": {"type": "object", "properties": {"meow": {"type": "boolean"}}},
            "Dog": {"type": "object", "properties": {"bark": {"type": "boolean"}}},
        }
        files = generate(make_document(schemas=schemas), tmp_path)
        assert files["models/animal.ts"] == HEADER + (
            "import type { Cat } from './cat';\n"
            "import type { Dog } from './dog';\n"
            "\n"
            "export type Animal = Cat | Dog;\n"
        )

    def test_empty_schema_is_any_alias(self, make_document, tmp_path: Path) -> None:
        files = generate(make_document(schemas={"Anything": {}}), tmp_path)
        assert files["models/anything.ts"] == HEADER + "export type Anything = any;\n"

    def test_circular_references_stay_nominal(self, make_document, tmp_path: Path) -> None:
        schemas = {
            "A": {"type": "object", "properties": {"b": ref("B")}},
            "B": {"type": "object", "properties": {"a": ref("A")}},
        }
        files = generate(make_document(schemas=schemas), tmp_path)
        assert files["models/a.ts"] == HEADER + "import type { B } from './b';\n\nexport interface A { b?: B }\n"
        assert files["models/b.ts"] == HEADER + "import type { A } from './a';\n\nexport interface B { a?: A }\n"

    def test_nullable_flag_on_reference(self, make_document, tmp_path: Path) -> None:
        schemas = {
            "Owner": {"type": "object", "properties": {"name": {"type": "string"}}},
            "Pet": {"type": "object", "properties": {"owner": {**ref("Owner"), "nullable": True}}},
        }
        files = generate(make_document(schemas=schemas), tmp_path)
        # primitives sort ahead of references
        assert files["models/pet.ts"] == (
            HEADER + "import type { Owner } from './owner';\n\nexport interface Pet { owner?: null | Owner }\n"
        )


class TestOperations:
    def test_post_with_body(self, petstore_document, tmp_path: Path) -> None:
        api = generate(petstore_document, tmp_path, max_line_width=200)["apis/PetApi.ts"]
        assert (
            "  async addPetRaw(body: Pet, initOverrides?: RequestInit | InitOverrideFunction): "
            "Promise<JSONApiResponse<Pet>> {\n"
        ) in api
        assert "headerParameters['Content-Type'] = 'application/json';" in api
        assert "body: JSON.stringify(body)," in api

    def test_path_parameter(self, petstore_document, tmp_path: Path) -> None:
        api = generate(petstore_document, tmp_path, max_line_width=200)["apis/PetApi.ts"]
        assert (
            "  async getPetByIdRaw(petId: number, initOverrides?: RequestInit | InitOverrideFunction): "
            "Promise<JSONApiResponse<Pet>> {\n"
        ) in api
        assert "path: `/pet/${encodeURIComponent(String(petId))}`," in api

    def test_untagged_operations_go_to_default_api(self, make_document, tmp_path: Path) -> None:
        document = make_document(paths={"/health": {"get": {"responses": {"204": {"description": "OK"}}}}})
        files = generate(document, tmp_path)
        assert "async getHealth(" in files["apis/DefaultApi.ts"]


def test_pipeline_normalises_schema_names(make_document, tmp_path: Path) -> None:
    document = make_document(
        schemas={
            "pet_status": {"type": "string", "enum": ["a"]},
            "pet": {"type": "object", "properties": {"status": ref("pet_status")}},
        }
    )
    TransformPipeline.default().apply(document)
    assert list(document.schemas) == ["PetStatus", "Pet"]
    files = generate(document, tmp_path)
    assert "import type { PetStatus } from './pet-status';" in files["models/pet.ts"]
