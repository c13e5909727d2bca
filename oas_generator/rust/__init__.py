from .generator import RustGenerator
from .type_mapping import RustModel, build_model, rust_type_from_openapi

__all__ = ["RustGenerator", "RustModel", "build_model", "rust_type_from_openapi"]
