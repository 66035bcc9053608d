# cinema_api/movies/filters.py
import math
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, model_serializer

from ..validator import Validator, permitted_value

MAX_PAGE = 10_000_000
MAX_PAGE_SIZE = 100

MOVIE_SORT_SAFELIST: Tuple[str, ...] = (
    "id", "title", "year", "runtime",
    "-id", "-title", "-year", "-runtime",
)


class Filters(BaseModel):
    """
    Paging and sorting parameters for a listing query.

    ``sort`` names a column, optionally prefixed with "-" for descending
    order, and must be one of ``sort_safelist``. The safelist is the only
    way a sort value reaches SQL.
    """

    model_config = ConfigDict(frozen=True)

    page: int = 1
    page_size: int = 20
    sort: str = "id"
    sort_safelist: Tuple[str, ...] = MOVIE_SORT_SAFELIST

    def sort_column(self) -> str:
        for safe_value in self.sort_safelist:
            if self.sort == safe_value:
                return self.sort.lstrip("-")
        raise ValueError(f"unsafe sort parameter: {self.sort}")

    def sort_direction(self) -> str:
        return "DESC" if self.sort.startswith("-") else "ASC"

    def limit(self) -> int:
        return self.page_size

    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def validate_filters(v: Validator, f: Filters) -> None:
    v.check(f.page > 0, "page", "must be greater than zero")
    v.check(f.page <= MAX_PAGE, "page", "must be a maximum of 10 million")
    v.check(f.page_size > 0, "page_size", "must be greater than zero")
    v.check(f.page_size <= MAX_PAGE_SIZE, "page_size", f"must be a maximum of {MAX_PAGE_SIZE}")
    v.check(permitted_value(f.sort, *f.sort_safelist), "sort", "invalid sort value")


class Metadata(BaseModel):
    """Pagination metadata for a listing response. Serializes to {} when nothing matched."""

    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0

    @model_serializer(mode="wrap")
    def _omit_when_empty(self, handler) -> Dict[str, Any]:
        if self.total_records == 0:
            return {}
        return handler(self)


def calculate_metadata(total_records: int, page: int, page_size: int) -> Metadata:
    if total_records == 0:
        return Metadata()

    return Metadata(
        current_page=page,
        page_size=page_size,
        first_page=1,
        last_page=math.ceil(total_records / page_size),
        total_records=total_records
    )
