"""Utilities for writing transformed JavaScript documents back to source."""

from .writer import EditList, EmitError, EmitOptions, EmitResult, emit_source

__all__ = ["EditList", "EmitError", "EmitOptions", "EmitResult", "emit_source"]
