from .exceptions import (
    DefinitionError,
    DefinitionLoadError,
    DefinitionNotFoundError,
    DefinitionValidationError,
    DuplicateDefinitionError,
)
from .indexer_definition import (
    RAW_MARKER,
    Capabilities,
    FieldSpec,
    FilterSpec,
    IndexerDefinition,
    RowsSpec,
    SearchPath,
    SearchSpec,
)

__all__ = [
    "RAW_MARKER",
    "Capabilities",
    "DefinitionError",
    "DefinitionLoadError",
    "DefinitionNotFoundError",
    "DefinitionValidationError",
    "DuplicateDefinitionError",
    "FieldSpec",
    "FilterSpec",
    "IndexerDefinition",
    "RowsSpec",
    "SearchPath",
    "SearchSpec",
]
