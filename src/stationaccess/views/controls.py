"""Selection-control configuration for forms and filters.

Each control is a plain object carrying its current value, the options a
user can pick from, and the handler to call on change. Renderers draw these
directly; nothing inspects markup to discover options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from stationaccess.catalog.stations import StationCatalog
from stationaccess.core.types import (
    FilterState,
    IssueCategory,
    ReportStatus,
    SortOrder,
    UrgencyLevel,
)

ALL = "all"

_SORT_LABELS: dict[SortOrder, str] = {
    SortOrder.CREATED_DESC: "Newest First",
    SortOrder.URGENCY_DESC: "Urgency (High to Low)",
}


@dataclass(frozen=True)
class SelectOption:
    label: str
    value: str


@dataclass
class SelectControl:
    value: str
    options: list[SelectOption]
    on_change: Callable[[str], None]
    placeholder: str = ""
    values: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        self.values = frozenset(o.value for o in self.options)

    def select(self, value: str) -> None:
        """Pick *value* and notify the owner. Unknown values raise ``ValueError``."""
        if value not in self.values:
            raise ValueError(f"{value!r} is not one of the available options")
        self.value = value
        self.on_change(value)


def _options(values: list[str]) -> list[SelectOption]:
    return [SelectOption(label=v, value=v) for v in values]


def city_select(
    catalog: StationCatalog, value: str, on_change: Callable[[str], None]
) -> SelectControl:
    return SelectControl(value=value, options=_options(catalog.cities),
                         on_change=on_change, placeholder="Select city")


def station_select(
    catalog: StationCatalog, city: str, value: str, on_change: Callable[[str], None]
) -> SelectControl | None:
    """Station picker for *city*; ``None`` until a city is chosen."""
    if not city:
        return None
    return SelectControl(value=value, options=_options(catalog.stations_for(city)),
                         on_change=on_change, placeholder="Select station")


def category_select(value: str, on_change: Callable[[str], None]) -> SelectControl:
    return SelectControl(value=value, options=_options([c.value for c in IssueCategory]),
                         on_change=on_change, placeholder="Select issue type")


def urgency_select(value: str, on_change: Callable[[str], None]) -> SelectControl:
    return SelectControl(value=value or UrgencyLevel.MEDIUM.value,
                         options=_options([u.value for u in UrgencyLevel]),
                         on_change=on_change)


def _filter_select(
    label: str, values: list[str], current: str | None, apply: Callable[[str | None], None]
) -> SelectControl:
    options = [SelectOption(label=f"All {label}", value=ALL), *_options(values)]
    return SelectControl(
        value=current or ALL,
        options=options,
        on_change=lambda v: apply(None if v == ALL else v),
        placeholder=label,
    )


def filter_controls(
    filters: FilterState,
    catalog: StationCatalog,
    on_filter_change: Callable[[FilterState], None],
) -> dict[str, SelectControl]:
    """Status, urgency, city and sort selects bound to *filters*.

    Choosing the ``all`` option clears that constraint.
    """

    def setter(name: str) -> Callable[[str | None], None]:
        return lambda v: on_filter_change(filters.with_changes(**{name: v}))

    urgencies = [u.value for u in sorted(UrgencyLevel, key=lambda u: u.rank, reverse=True)]
    return {
        "status": _filter_select("Status", [s.value for s in ReportStatus],
                                 filters.status, setter("status")),
        "urgency": _filter_select("Urgency", urgencies, filters.urgency, setter("urgency")),
        "city": _filter_select("Cities", catalog.cities, filters.city, setter("city")),
        "sort": SelectControl(
            value=str(filters.sort),
            options=[SelectOption(label=_SORT_LABELS[s], value=s.value) for s in SortOrder],
            on_change=lambda v: on_filter_change(filters.with_changes(sort=v)),
            placeholder="Sort By",
        ),
    }
