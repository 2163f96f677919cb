"""REST API client for the reports service."""

from stationaccess.api.client import ReportsApiClient, handle_response

__all__ = ["ReportsApiClient", "handle_response"]
