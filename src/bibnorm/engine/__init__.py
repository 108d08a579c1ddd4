"""Entry assembly and its configuration."""

from bibnorm.engine.assembler import AssemblyResult, assemble, assemble_entries
from bibnorm.engine.config import DEFAULT_FIELD_SEMANTICS, AssemblyConfig, FieldSemantics

__all__ = [
    "AssemblyConfig",
    "AssemblyResult",
    "DEFAULT_FIELD_SEMANTICS",
    "FieldSemantics",
    "assemble",
    "assemble_entries",
]
