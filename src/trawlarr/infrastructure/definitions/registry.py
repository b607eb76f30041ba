"""Indexer definition registry with lazy loading and in-memory caching."""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml

from trawlarr.domain.definitions import (
    DefinitionError,
    DefinitionNotFoundError,
    DuplicateDefinitionError,
    IndexerDefinition,
)

from .loader import load_definition

log = structlog.get_logger(__name__)

DEFINITION_SUFFIXES = frozenset({".yml", ".yaml"})


class DefinitionRegistry:
    """
    Lazy-loading registry of YAML indexer definitions.

    discover():
      - indexes files only (no YAML parsing)

    get()/list_ids()/load_all()/load_valid():
      - parse on demand and cache by definition id
    """

    def __init__(self, definitions_dir: Path) -> None:
        self._dir = definitions_dir
        self._discovered = False
        self._paths: list[Path] = []
        self._cache: dict[str, IndexerDefinition] = {}

    @property
    def definitions_dir(self) -> Path:
        return self._dir

    def discover(self) -> None:
        if self._discovered:
            return

        self._discovered = True
        self._paths = []

        if not self._dir.is_dir():
            log.warning("definitions_directory_not_found", directory=str(self._dir))
            return

        self._paths = [
            path
            for path in sorted(self._dir.iterdir(), key=lambda p: p.name)
            if path.is_file() and path.suffix.lower() in DEFINITION_SUFFIXES
        ]

        log.info(
            "definitions_discovered",
            count=len(self._paths),
            directory=str(self._dir),
        )
        if not self._paths:
            log.warning("no_definitions_found", directory=str(self._dir))

    def list_ids(self) -> list[str]:
        """Definition ids without full validation (duplicates collapsed)."""
        self.discover()
        ids = {self._peek_id(path) for path in self._paths}
        return sorted(i for i in ids if i is not None)

    def get(self, definition_id: str) -> IndexerDefinition:
        self.discover()

        cached = self._cache.get(definition_id)
        if cached is not None:
            return cached

        for path in self._paths:
            if self._peek_id(path) != definition_id:
                continue
            return self._load(path)

        raise DefinitionNotFoundError(f"Definition '{definition_id}' not found")

    def load_all(self) -> list[IndexerDefinition]:
        """
        Load every discovered definition, sorted by id.

        Raises DuplicateDefinitionError and validation/load errors.
        """
        self.discover()

        loaded: dict[str, IndexerDefinition] = {}
        for path in self._paths:
            definition = self._load(path)
            if definition.id in loaded:
                raise DuplicateDefinitionError(
                    f"Definition id '{definition.id}' already exists ({path.name})"
                )
            loaded[definition.id] = definition
        return sorted(loaded.values(), key=lambda d: d.id)

    def load_valid(self) -> list[IndexerDefinition]:
        """Like :meth:`load_all` but skips broken files and later duplicates."""
        self.discover()

        loaded: dict[str, IndexerDefinition] = {}
        for path in self._paths:
            try:
                definition = self._load(path)
            except DefinitionError as e:
                log.warning(
                    "definition_skipped", definition_file=str(path), error=str(e)
                )
                continue
            if definition.id in loaded:
                log.warning(
                    "definition_duplicate_skipped",
                    definition_id=definition.id,
                    definition_file=str(path),
                )
                continue
            loaded[definition.id] = definition
        return sorted(loaded.values(), key=lambda d: d.id)

    def _load(self, path: Path) -> IndexerDefinition:
        definition = load_definition(path)
        cached = self._cache.get(definition.id)
        if cached is not None:
            return cached
        self._cache[definition.id] = definition
        log.debug("definition_loaded", definition_id=definition.id)
        return definition

    @staticmethod
    def _peek_id(path: Path) -> str | None:
        """Read the top-level ``id`` (or the file stem) without validation."""
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError):
            return None
        if not isinstance(data, dict):
            return None
        definition_id = data.get("id", path.stem.lower())
        if isinstance(definition_id, str) and definition_id.strip():
            return definition_id
        return None
