from __future__ import annotations

from .loader import load_definition
from .registry import DefinitionRegistry

__all__ = ["DefinitionRegistry", "load_definition"]
