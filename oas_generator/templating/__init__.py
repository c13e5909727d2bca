from .filters import FILTERS
from .template_engine import TemplateEngine, file_header

__all__ = ["FILTERS", "TemplateEngine", "file_header"]
