"""Schemas describing a list endpoint's search/filter/sort configuration."""

from typing import Optional

from pydantic import Field

from bizops.schemas.common import CamelModel, OptionOut


class FilterOptionOut(CamelModel):
    key: str
    label: str
    operator: str = "equals"
    options: list[OptionOut] = Field(default_factory=list)


class TableConfigOut(CamelModel):
    entity: str
    search_fields: list[str]
    default_sort: str
    default_order: str
    operators: list[str]
    filters: list[FilterOptionOut]
    columns: Optional[list[str]] = None
