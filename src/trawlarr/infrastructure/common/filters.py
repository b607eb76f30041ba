"""Post-extraction filter chain for definition field values.

Filters are pure text transforms applied strictly in order.  Unknown
filter names (definitions written for a newer schema) pass the value
through unchanged, and so do malformed arguments; ``apply_filters`` never
raises.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from functools import lru_cache

import structlog

from trawlarr.domain.definitions import FilterSpec

log = structlog.get_logger(__name__)

_GO_GROUP_RE = re.compile(r"\$\{(\d+)\}|\$(\d+)")


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def _python_replacement(replacement: str) -> str:
    """Translate Go-style ``$1`` / ``${1}`` group refs to ``\\g<1>``."""
    escaped = replacement.replace("\\", "\\\\")
    return _GO_GROUP_RE.sub(
        lambda m: f"\\g<{m.group(1) or m.group(2)}>", escaped
    )


def _replace(value: str, find: str, replacement: str) -> str:
    return value.replace(find, replacement)


def _re_replace(value: str, pattern: str, replacement: str) -> str:
    return _compile(pattern).sub(_python_replacement(replacement), value)


def _trim(value: str, *chars: str) -> str:
    # Cardigann's trim optionally takes a cutset.
    return value.strip(chars[0]) if chars else value.strip()


def _append(value: str, suffix: str) -> str:
    return value + suffix


def _prepend(value: str, prefix: str) -> str:
    return prefix + value


_FILTERS: dict[str, Callable[..., str]] = {
    "replace": _replace,
    "re_replace": _re_replace,
    "trim": _trim,
    "append": _append,
    "prepend": _prepend,
    "lowercase": lambda value: value.lower(),
    "uppercase": lambda value: value.upper(),
}


def apply_filters(value: str, filters: Sequence[FilterSpec]) -> str:
    """Run *value* through *filters* in list order."""
    for spec in filters:
        fn = _FILTERS.get(spec.name)
        if fn is None:
            log.debug("filter_unknown_skipped", filter=spec.name)
            continue
        try:
            value = fn(value, *spec.args)
        except (TypeError, re.error) as e:
            log.debug(
                "filter_skipped",
                filter=spec.name,
                args=list(spec.args),
                error=str(e),
            )
    return value
