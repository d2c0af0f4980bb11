"""Front-end pipeline glue for parsing, analysis and document loading."""

from .document import Document
from .pipeline import FrontEndResult, load, load_ast, run_frontend

__all__ = ["Document", "FrontEndResult", "load", "load_ast", "run_frontend"]
