import logging

import pytest

from oas_generator.errors import InputError
from oas_generator.parser import (
    NamingConventionPass,
    ReferenceResolutionPass,
    SchemaNormalizationPass,
    TransformPipeline,
    ValidationPass,
)


class TestValidationPass:
    def test_missing_title(self, make_document) -> None:
        with pytest.raises(InputError, match=r"\[info\] info.title is required"):
            ValidationPass().apply(make_document(title=""))

    def test_missing_version(self, make_document) -> None:
        with pytest.raises(InputError, match="info.version is required"):
            ValidationPass().apply(make_document(version=""))

    def test_schema_must_be_mapping(self, make_document) -> None:
        with pytest.raises(InputError) as exc_info:
            ValidationPass().apply(make_document(schemas={"Broken": ["not", "a", "schema"]}))
        assert exc_info.value.element == "#/components/schemas/Broken"

    def test_no_paths_warns(self, make_document, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            ValidationPass().apply(make_document())
        assert "declares no paths" in caplog.text


class TestReferenceResolutionPass:
    def test_reports_unresolved_and_external(self, make_document, caplog: pytest.LogCaptureFixture) -> None:
        document = make_document(
            schemas={
                "Pet": {
                    "type": "object",
                    "properties": {
                        "owner": {"$ref": "#/components/schemas/Owner"},
                        "remote": {"$ref": "https://example.com/schemas/x.json"},
                    },
                }
            }
        )
        with caplog.at_level(logging.WARNING):
            ReferenceResolutionPass().apply(document)
        assert "Unresolved schema reference #/components/schemas/Owner" in caplog.text
        assert "External reference https://example.com/schemas/x.json" in caplog.text
        assert document.schemas["Pet"]["properties"]["owner"] == {"$ref": "#/components/schemas/Owner"}


class TestNamingConventionPass:
    def test_renames_and_rewrites_references(self, make_document) -> None:
        document = make_document(
            schemas={
                "pet_status": {"type": "string"},
                "pet": {"type": "object", "properties": {"status": {"$ref": "#/components/schemas/pet_status"}}},
            },
            paths={
                "/pets": {
                    "get": {
                        "responses": {
                            "200": {
                                "description": "OK",
                                "content": {"application/json": {"schema": {"$ref": "#/components/schemas/pet"}}},
                            }
                        }
                    }
                }
            },
        )
        NamingConventionPass().apply(document)
        assert list(document.schemas) == ["PetStatus", "Pet"]
        assert document.schemas["Pet"]["properties"]["status"] == {"$ref": "#/components/schemas/PetStatus"}
        media = document.operations[0].responses["200"].content["application/json"]
        assert media.schema == {"$ref": "#/components/schemas/Pet"}

    def test_collisions_get_suffixes(self, make_document, caplog: pytest.LogCaptureFixture) -> None:
        document = make_document(schemas={"pet-status": {"type": "string"}, "pet_status": {"type": "integer"}})
        with caplog.at_level(logging.WARNING):
            NamingConventionPass().apply(document)
        assert list(document.schemas) == ["PetStatus", "PetStatus2"]
        assert "renamed to 'PetStatus2'" in caplog.text


class TestSchemaNormalizationPass:
    def test_nullable_becomes_null_type(self, make_document) -> None:
        document = make_document(
            schemas={
                "A": {"type": "string", "nullable": True},
                "B": {"type": ["integer"]},
                "C": {"type": "object", "properties": {"x": {"type": ["number", "null"], "nullable": True}}},
                "D": {"$ref": "#/components/schemas/A", "nullable": True},
            }
        )
        SchemaNormalizationPass().apply(document)
        assert document.schemas["A"] == {"type": ["string", "null"]}
        assert document.schemas["B"] == {"type": "integer"}
        assert document.schemas["C"]["properties"]["x"] == {"type": ["number", "null"]}
        assert document.schemas["D"] == {"$ref": "#/components/schemas/A", "nullable": True}


def test_default_pipeline_order() -> None:
    assert [transform.name for transform in TransformPipeline.default().passes] == [
        "validation",
        "reference-resolution",
        "naming-convention",
        "schema-normalization",
    ]
