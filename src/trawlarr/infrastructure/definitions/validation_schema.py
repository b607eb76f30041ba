"""Pydantic validation models for indexer definition YAML files."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from trawlarr.infrastructure.indexers.selectors import (
    compile_json_path,
    is_json_selector,
)

DEFINITION_ID_RE = r"^[a-z0-9][a-z0-9_.-]*$"
REQUIRED_FIELD = "title"
DOWNLOAD_FIELDS = ("download", "magnet")


def _as_str(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


class FilterModel(BaseModel):
    name: str = Field(..., min_length=1)
    args: List[str] = Field(default_factory=list)

    @field_validator("args", mode="before")
    @classmethod
    def _coerce_args(cls, v: Any) -> list[str]:
        # Cardigann allows a bare scalar for single-argument filters.
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [_as_str(a) for a in v]
        return [_as_str(v)]


class FieldModel(BaseModel):
    selector: str = ""
    attribute: Optional[str] = None
    filters: List[FilterModel] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _shorthand(cls, data: Any) -> Any:
        # `title: "td.name a"` is shorthand for `title: {selector: ...}`
        if isinstance(data, str):
            return {"selector": data}
        return data


class SearchPathModel(BaseModel):
    path: str = Field(..., min_length=1)
    method: Literal["get", "post"] = "get"
    categories: List[int] = Field(default_factory=list)

    @field_validator("method", mode="before")
    @classmethod
    def _lower_method(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v


class RowsModel(BaseModel):
    selector: str = Field(..., min_length=1)
    after: int = Field(default=0, ge=0)

    @field_validator("selector")
    @classmethod
    def _validate_json_path(cls, v: str) -> str:
        if is_json_selector(v):
            compile_json_path(v)  # ValueError -> validation error
        return v


class SearchModel(BaseModel):
    path: Optional[str] = Field(
        default=None, description="Shorthand for a single GET path."
    )
    paths: List[SearchPathModel] = Field(default_factory=list)
    inputs: Dict[str, str] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    rows: RowsModel
    fields: Dict[str, FieldModel] = Field(default_factory=dict)

    @field_validator("inputs", "headers", mode="before")
    @classmethod
    def _stringify_values(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {
                str(k): "" if val is None else _as_str(val) for k, val in v.items()
            }
        return v

    @model_validator(mode="after")
    def _validate_search(self) -> "SearchModel":
        if self.path and not self.paths:
            self.paths = [SearchPathModel(path=self.path)]
        if not self.paths:
            raise ValueError("search requires 'path' or at least one entry in 'paths'")

        if REQUIRED_FIELD not in self.fields:
            raise ValueError("search.fields must define 'title'")
        if not any(name in self.fields for name in DOWNLOAD_FIELDS):
            raise ValueError("search.fields must define 'download' or 'magnet'")
        return self


class CapabilitiesModel(BaseModel):
    categories: List[int] = Field(default_factory=list)
    modes: List[str] = Field(default_factory=lambda: ["search"])

    @field_validator("categories", mode="before")
    @classmethod
    def _category_keys(cls, v: Any) -> Any:
        # {2000: "Movies", 5000: "TV"} -> [2000, 5000]
        if isinstance(v, dict):
            return list(v.keys())
        return v

    @field_validator("modes", mode="before")
    @classmethod
    def _mode_keys(cls, v: Any) -> Any:
        # Cardigann style: {search: [q], tv-search: [q, season, ep]}
        if isinstance(v, dict):
            return list(v.keys())
        return v


class IndexerDefinitionPydantic(BaseModel):
    id: str = Field(..., pattern=DEFINITION_ID_RE)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    language: str = "en-US"
    type: Literal["public", "semi-private", "private"] = "public"
    links: List[str] = Field(..., min_length=1)
    caps: CapabilitiesModel = Field(default_factory=CapabilitiesModel)
    request_delay: Optional[float] = Field(default=None, ge=0)
    follow_redirect: bool = True
    search: SearchModel

    @field_validator("links")
    @classmethod
    def _validate_links(cls, v: list[str]) -> list[str]:
        for link in v:
            if not link.startswith(("http://", "https://")):
                raise ValueError(f"link must be an http(s) URL: {link!r}")
        return v
