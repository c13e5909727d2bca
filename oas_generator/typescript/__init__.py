from .generator import TypeScriptGenerator

__all__ = ["TypeScriptGenerator"]
