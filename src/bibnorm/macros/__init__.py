"""Macro tables and macro reference resolution."""

from bibnorm.macros.resolver import resolve
from bibnorm.macros.table import MONTH_MACROS, MacroTable

__all__ = ["MacroTable", "MONTH_MACROS", "resolve"]
