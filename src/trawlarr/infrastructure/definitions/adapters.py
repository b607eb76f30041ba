"""Adapters to convert Pydantic validation models to domain models."""

from __future__ import annotations

from trawlarr.domain import definitions as domain
from trawlarr.infrastructure.definitions import validation_schema as infra


def to_domain_filter(pydantic: infra.FilterModel) -> domain.FilterSpec:
    return domain.FilterSpec(name=pydantic.name, args=tuple(pydantic.args))


def to_domain_field(pydantic: infra.FieldModel) -> domain.FieldSpec:
    return domain.FieldSpec(
        selector=pydantic.selector,
        attribute=pydantic.attribute,
        filters=tuple(to_domain_filter(f) for f in pydantic.filters),
    )


def to_domain_search_path(pydantic: infra.SearchPathModel) -> domain.SearchPath:
    return domain.SearchPath(
        path=pydantic.path,
        method=pydantic.method,
        categories=tuple(pydantic.categories),
    )


def to_domain_search(pydantic: infra.SearchModel) -> domain.SearchSpec:
    return domain.SearchSpec(
        paths=tuple(to_domain_search_path(p) for p in pydantic.paths),
        rows=domain.RowsSpec(
            selector=pydantic.rows.selector, after=pydantic.rows.after
        ),
        fields={
            name: to_domain_field(spec) for name, spec in pydantic.fields.items()
        },
        inputs=dict(pydantic.inputs),
        headers=dict(pydantic.headers),
    )


def to_domain_definition(
    pydantic: infra.IndexerDefinitionPydantic,
) -> domain.IndexerDefinition:
    """Convert a validated YAML definition into the frozen domain model."""
    return domain.IndexerDefinition(
        id=pydantic.id,
        name=pydantic.name,
        links=tuple(pydantic.links),
        search=to_domain_search(pydantic.search),
        capabilities=domain.Capabilities(
            categories=tuple(pydantic.caps.categories),
            modes=tuple(pydantic.caps.modes),
        ),
        description=pydantic.description,
        language=pydantic.language,
        type=pydantic.type,
        request_delay=pydantic.request_delay,
        follow_redirect=pydantic.follow_redirect,
    )
