"""Identical input produces byte-identical output."""

import copy
from pathlib import Path

from oas_generator.driver import GeneratorDriver
from oas_generator.parser import OASParser


def snapshot(root: Path) -> dict[str, bytes]:
    return {path.relative_to(root).as_posix(): path.read_bytes() for path in sorted(root.rglob("*")) if path.is_file()}


def test_two_runs_are_byte_identical(petstore_spec, tmp_path: Path) -> None:
    for run in ("first", "second"):
        document = OASParser().parse_dict(copy.deepcopy(petstore_spec))
        GeneratorDriver().generate_document(document, tmp_path / run, ["typescript", "rust"])
    assert snapshot(tmp_path / "first") == snapshot(tmp_path / "second")


def test_regenerating_into_same_directory(petstore_document, tmp_path: Path) -> None:
    GeneratorDriver().generate_document(petstore_document, tmp_path, ["typescript"])
    before = snapshot(tmp_path)
    GeneratorDriver().generate_document(petstore_document, tmp_path, ["typescript"])
    assert snapshot(tmp_path) == before


def test_schema_declaration_order_does_not_change_output(petstore_spec, tmp_path: Path) -> None:
    reordered = copy.deepcopy(petstore_spec)
    reordered["components"]["schemas"] = dict(reversed(list(reordered["components"]["schemas"].items())))
    GeneratorDriver().generate_document(OASParser().parse_dict(petstore_spec), tmp_path / "a", ["typescript"])
    GeneratorDriver().generate_document(OASParser().parse_dict(reordered), tmp_path / "b", ["typescript"])
    assert snapshot(tmp_path / "a") == snapshot(tmp_path / "b")


def test_union_members_are_never_repeated(make_document, tmp_path: Path) -> None:
    schema = {"oneOf": [{"type": "string"}, {"type": "string"}, {"type": ["string", "null"]}]}
    document = make_document(schemas={"Name": schema})
    written = GeneratorDriver().generate_document(document, tmp_path, ["typescript"])
    content = written[tmp_path / "models" / "name.ts"].decode("utf-8")
    assert content.endswith("export type Name = string | null;\n")
