"""Indexer definition exceptions."""

from __future__ import annotations


class DefinitionError(Exception):
    """Base class for all definition-related errors."""


class DefinitionValidationError(DefinitionError):
    """Raised when a YAML definition fails schema validation."""


class DefinitionLoadError(DefinitionError):
    """Raised when a definition file cannot be read."""


class DefinitionNotFoundError(DefinitionError):
    """Raised when a definition id is not known to the registry."""


class DuplicateDefinitionError(DefinitionError):
    """Raised when two definition files resolve to the same id."""
