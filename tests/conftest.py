"""Shared OpenAPI documents for the generator tests."""

from __future__ import annotations

import copy
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

from oas_generator.parser import OASParser, OpenApiDocument

PET_REF = {"$ref": "#/components/schemas/Pet"}

PETSTORE_SPEC: dict[str, Any] = {
    "openapi": "3.1.0",
    "info": {"title": "Petstore", "version": "1.0.0", "description": "Sample pet store"},
    "servers": [{"url": "https://petstore.example.com/v1"}],
    "paths": {
        "/pet": {
            "post": {
                "tags": ["pet"],
                "operationId": "addPet",
                "summary": "Add a new pet to the store",
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": PET_REF}},
                },
                "responses": {
                    "200": {"description": "Successful operation", "content": {"application/json": {"schema": PET_REF}}},
                    "405": {"description": "Invalid input"},
                },
            }
        },
        "/pet/{petId}": {
            "get": {
                "tags": ["pet"],
                "operationId": "getPetById",
                "parameters": [
                    {"name": "petId", "in": "path", "required": True, "schema": {"type": "integer", "format": "int64"}}
                ],
                "responses": {
                    "200": {"description": "Successful operation", "content": {"application/json": {"schema": PET_REF}}},
                    "404": {"description": "Pet not found"},
                },
            },
            "delete": {
                "tags": ["pet"],
                "operationId": "deletePet",
                "parameters": [
                    {"name": "petId", "in": "path", "required": True, "schema": {"type": "integer"}},
                    {"name": "api_key", "in": "header", "schema": {"type": "string"}},
                ],
                "responses": {"204": {"description": "Pet deleted"}},
            },
        },
        "/pet/findByStatus": {
            "get": {
                "tags": ["pet"],
                "operationId": "findPetsByStatus",
                "parameters": [
                    {"name": "status", "in": "query", "schema": {"$ref": "#/components/schemas/PetStatus"}}
                ],
                "responses": {
                    "200": {
                        "description": "Successful operation",
                        "content": {"application/json": {"schema": {"type": "array", "items": PET_REF}}},
                    }
                },
            }
        },
        "/store/inventory": {
            "get": {
                "tags": ["store"],
                "operationId": "getInventory",
                "security": [{"api_key": []}],
                "responses": {
                    "200": {
                        "description": "Successful operation",
                        "content": {
                            "application/json": {
                                "schema": {"type": "object", "additionalProperties": {"type": "integer"}}
                            }
                        },
                    }
                },
            }
        },
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "id": {"type": "integer", "format": "int64"},
                    "name": {"type": "string"},
                    "category": {"$ref": "#/components/schemas/Category"},
                    "status": {"$ref": "#/components/schemas/PetStatus"},
                    "tags": {"type": "array", "items": {"type": "string"}},
                },
            },
            "Category": {
                "type": "object",
                "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
            },
            "PetStatus": {"type": "string", "enum": ["available", "pending", "sold"]},
        },
        "securitySchemes": {"api_key": {"type": "apiKey", "name": "api_key", "in": "header"}},
    },
}


@pytest.fixture
def petstore_spec() -> dict[str, Any]:
    """A fresh copy of the petstore specification dictionary."""
    return copy.deepcopy(PETSTORE_SPEC)


@pytest.fixture
def petstore_document(petstore_spec: dict[str, Any]) -> OpenApiDocument:
    return OASParser().parse_dict(petstore_spec)


@pytest.fixture
def make_document() -> Callable[..., OpenApiDocument]:
    """Factory building a parsed document from schemas and paths."""

    def _make(
        schemas: dict[str, Any] | None = None,
        paths: dict[str, Any] | None = None,
        title: str = "Test API",
        version: str = "1.0.0",
        **extra: Any,
    ) -> OpenApiDocument:
        spec: dict[str, Any] = {
            "openapi": "3.1.0",
            "info": {"title": title, "version": version},
            "paths": copy.deepcopy(paths or {}),
            "components": {"schemas": copy.deepcopy(schemas or {})},
            **extra,
        }
        return OASParser().parse_dict(spec)

    return _make


@pytest.fixture
def write_spec(tmp_path: Path) -> Callable[..., Path]:
    """Write a specification to ``tmp_path`` as JSON or YAML and return its path."""

    def _write(spec: dict[str, Any], filename: str = "spec.json") -> Path:
        path = tmp_path / filename
        if path.suffix in {".yaml", ".yml"}:
            path.write_text(yaml.safe_dump(spec, sort_keys=False), encoding="utf-8")
        else:
            path.write_text(json.dumps(spec, indent=2), encoding="utf-8")
        return path

    return _write
