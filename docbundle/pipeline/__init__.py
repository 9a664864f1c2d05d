"""Build pipeline steps: clean, transform, compile."""

from .cleaner import clean
from .compiler import compile_docs, select_sources
from .runner import DocumentationBuildPipeline
from .status import collect_status
from .transformer import DocumentTransformer, has_markup

__all__ = [
    "DocumentTransformer",
    "DocumentationBuildPipeline",
    "clean",
    "collect_status",
    "compile_docs",
    "has_markup",
    "select_sources",
]
