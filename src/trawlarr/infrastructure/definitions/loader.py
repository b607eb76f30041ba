from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from trawlarr.domain.definitions import (
    DefinitionLoadError,
    DefinitionValidationError,
    IndexerDefinition,
)
from trawlarr.infrastructure.definitions.adapters import to_domain_definition
from trawlarr.infrastructure.definitions.validation_schema import (
    IndexerDefinitionPydantic,
)

log = structlog.get_logger(__name__)


def load_definition(path: Path) -> IndexerDefinition:
    """Load and validate a YAML indexer definition, returning the domain model.

    A definition without an ``id`` takes its file stem.
    """
    try:
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw)
        if data is None:
            raise DefinitionValidationError("YAML file is empty")
        if not isinstance(data, dict):
            raise DefinitionValidationError("YAML root must be a mapping/object")

        data.setdefault("id", path.stem.lower())

        pydantic_model = IndexerDefinitionPydantic.model_validate(data)
        return to_domain_definition(pydantic_model)
    except (OSError, UnicodeDecodeError) as e:
        log.error(
            "definition_load_failed",
            definition_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise DefinitionLoadError(str(e)) from e
    except ValidationError as e:
        log.error(
            "definition_validation_failed",
            definition_file=str(path),
            error_type="ValidationError",
            error_details=e.errors(include_url=False),
        )
        raise DefinitionValidationError(str(e)) from e
    except yaml.YAMLError as e:
        log.error(
            "definition_validation_failed",
            definition_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise DefinitionValidationError(str(e)) from e
