# app/domain/query.py
"""
Query builder da listagem de vídeos.

Traduz os parâmetros da requisição (page, limit, query, userId, sortBy,
sortType) numa especificação explícita de filtro + ordenação + janela de
paginação. Função pura: nada de I/O, mesmo resultado para a mesma entrada.
"""
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from app.core.errors import ValidationError
from app.domain import schema

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class MatchAll:
    pass


@dataclass(frozen=True)
class ByOwner:
    owner_id: str
    field: str = schema.OWNER


@dataclass(frozen=True)
class ByTextMatch:
    """Substring case-insensitive em qualquer um dos campos (OR)."""
    text: str
    fields: Tuple[str, ...] = (schema.TITLE, schema.DESCRIPTION)


@dataclass(frozen=True)
class Combined:
    """Conjunção (AND) das partes."""
    parts: Tuple["VideoFilter", ...]


VideoFilter = Union[MatchAll, ByOwner, ByTextMatch, Combined]


@dataclass(frozen=True)
class SortSpec:
    field: str
    descending: bool = False


DEFAULT_SORT = SortSpec(schema.CREATED_AT)


@dataclass(frozen=True)
class ListQuery:
    filter: VideoFilter
    sort: SortSpec
    page: int
    offset: int
    limit: int


def _positive_int(value: Any, default: int) -> int:
    # zero, negativo ou lixo voltam ao default
    if value is None or isinstance(value, bool):
        return default
    try:
        n = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return n if n > 0 else default


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def build_filter(query: Optional[str] = None, user_id: Optional[str] = None) -> VideoFilter:
    parts = []
    if not _blank(user_id):
        parts.append(ByOwner(str(user_id).strip()))
    if not _blank(query):
        parts.append(ByTextMatch(str(query).strip().lower()))

    if not parts:
        return MatchAll()
    if len(parts) == 1:
        return parts[0]
    return Combined(tuple(parts))


def build_sort(sort_by: Optional[str] = None, sort_type: Optional[str] = None) -> SortSpec:
    # sortBy e sortType só valem juntos
    if _blank(sort_by) or _blank(sort_type):
        return DEFAULT_SORT
    field = sort_by.strip()
    if field not in schema.SORTABLE_VIDEO_FIELDS:
        raise ValidationError(
            f"sortBy inválido: {field}",
            [{"sortBy": field, "allowed": sorted(schema.SORTABLE_VIDEO_FIELDS)}],
        )
    return SortSpec(field, descending=sort_type.strip().lower() == "desc")


def build_video_query(
    page: Any = None,
    limit: Any = None,
    query: Optional[str] = None,
    user_id: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_type: Optional[str] = None,
    *,
    default_page: int = DEFAULT_PAGE,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: Optional[int] = None,
) -> ListQuery:
    page_n = _positive_int(page, default_page)
    limit_n = _positive_int(limit, default_limit)
    if max_limit is not None:
        limit_n = min(limit_n, max_limit)

    return ListQuery(
        filter=build_filter(query, user_id),
        sort=build_sort(sort_by, sort_type),
        page=page_n,
        offset=(page_n - 1) * limit_n,
        limit=limit_n,
    )
