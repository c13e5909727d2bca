from .doc import render
from .pretty_printer import EmissionContext, TsPrettyPrinter, format_doc_comment

__all__ = ["EmissionContext", "TsPrettyPrinter", "format_doc_comment", "render"]
