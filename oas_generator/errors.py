"""Exceptions raised by the generator."""

from __future__ import annotations

from typing import ClassVar

EXIT_SUCCESS = 0
EXIT_INPUT_ERROR = 1
EXIT_UNKNOWN_LANGUAGE = 2
EXIT_FILESYSTEM_ERROR = 3
EXIT_GENERATION_ERROR = 4


class GeneratorError(Exception):
    """Base exception for generation failures.

    ``element`` names the file, schema or path the failure is about and is
    prefixed to the message.
    """

    kind: ClassVar[str] = "internal"
    exit_code: ClassVar[int] = EXIT_GENERATION_ERROR

    def __init__(self, message: str, *, element: str | None = None) -> None:
        self.element = element
        self.message = message
        full_message = message if not element else f"[{element}] {message}"
        super().__init__(full_message)

    def describe(self) -> str:
        """Single-line diagnostic naming the error kind and the element."""
        return f"{self.kind} error: {self}"


class InputError(GeneratorError):
    """Raised for malformed YAML/JSON, failed validation or an unsupported OpenAPI version."""

    kind = "input"
    exit_code = EXIT_INPUT_ERROR


class GeneratorNotFoundError(GeneratorError):
    """Raised when no backend is registered under the requested language key."""

    kind = "generator-not-found"
    exit_code = EXIT_UNKNOWN_LANGUAGE

    def __init__(self, language: str, available: list[str] | None = None) -> None:
        self.language = language
        message = f"generator not found for language '{language}'"
        if available:
            message = f"{message} (available: {', '.join(available)})"
        super().__init__(message)


class EmissionError(GeneratorError):
    """Raised for missing templates, rendering failures or broken AST invariants."""

    kind = "emission"
    exit_code = EXIT_GENERATION_ERROR


class FileSystemWriteError(GeneratorError):
    """Raised when generated files cannot be written."""

    kind = "filesystem"
    exit_code = EXIT_FILESYSTEM_ERROR
