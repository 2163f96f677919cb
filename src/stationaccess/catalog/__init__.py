"""Station catalog."""

from stationaccess.catalog.stations import StationCatalog

__all__ = ["StationCatalog"]
