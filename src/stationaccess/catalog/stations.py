"""Transit station catalog: the closed list of stations for each city."""

from __future__ import annotations

from pathlib import Path

import yaml

_DEFAULT_STATIONS_PATH = Path(__file__).resolve().parent / "stations.yml"


class StationCatalog:
    """Stations per city, loaded from a YAML file.

    The file holds a ``cities`` mapping of city name to an ordered list of
    station names. City order in the file is the order offered to users.
    """

    def __init__(self, stations: dict[str, list[str]] | None = None) -> None:
        self._stations: dict[str, list[str]] = {
            city: list(names) for city, names in (stations or {}).items()
        }

    @classmethod
    def load(cls, path: str | Path | None = None) -> StationCatalog:
        path = Path(path) if path else _DEFAULT_STATIONS_PATH
        if not path.exists():
            return cls()
        with open(path) as fh:
            data = yaml.safe_load(fh) or {}
        cities = data.get("cities", {}) or {}
        return cls({str(city): [str(s) for s in names or []] for city, names in cities.items()})

    @property
    def cities(self) -> list[str]:
        return list(self._stations)

    def stations_for(self, city: str | None) -> list[str]:
        if not city:
            return []
        return list(self._stations.get(city, []))

    def is_valid(self, city: str, station: str) -> bool:
        return station in self._stations.get(city, ())
