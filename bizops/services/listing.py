"""Run loaded rows through the table pipeline and slice one page."""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.exceptions import BadRequestError, NotFoundError
from bizops.core.pagination import TableQueryParams
from bizops.core.response import paginate_records
from bizops.services.lookups import LookupService
from bizops.services.table import (
    TABLE_CONFIGS,
    FilterOperator,
    TableConfig,
    parse_filter_param,
    query_table,
)


def get_table_config(entity: str) -> TableConfig:
    config = TABLE_CONFIGS.get(entity)
    if config is None:
        raise NotFoundError("Table", entity)
    return config


def table_page(
    entity: str,
    items: Iterable[Any],
    schema: type[BaseModel],
    params: TableQueryParams,
) -> dict:
    """Search/filter/sort ``items`` (ORM rows) as ``schema`` records and paginate."""
    config = get_table_config(entity)
    columns = set(schema.model_fields)

    try:
        filters = [parse_filter_param(raw) for raw in params.filters]
    except ValueError as exc:
        raise BadRequestError(str(exc)) from exc
    unknown = sorted({spec.key for spec in filters} - columns)
    if unknown:
        raise BadRequestError(f"Cannot filter {entity} by: {', '.join(unknown)}")
    if params.sort and params.sort not in columns:
        raise BadRequestError(f"Cannot sort {entity} by: {params.sort}")

    records = [schema.model_validate(item).model_dump() for item in items]
    rows = query_table(
        records,
        config,
        query=params.q,
        filters=filters,
        sort=params.sort,
        order=params.order,
    )
    return paginate_records(rows, params.page, params.limit)


async def describe_table(session: AsyncSession, entity: str) -> dict:
    """Table configuration with filter options resolved (lookups are cached)."""
    config = get_table_config(entity)
    lookups = LookupService(session)
    filters = []
    for option in config.filters:
        if option.lookup:
            choices = await lookups.options(option.lookup)
        else:
            choices = [{"value": value, "label": label} for value, label in option.options]
        filters.append(
            {
                "key": option.key,
                "label": option.label,
                "operator": option.operator.value,
                "options": choices,
            }
        )
    return {
        "entity": config.entity,
        "search_fields": list(config.search_fields),
        "default_sort": config.default_sort,
        "default_order": config.default_order,
        "operators": [op.value for op in FilterOperator],
        "filters": filters,
    }
