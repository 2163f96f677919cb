"""Composition root: wire the client, cache and pipelines for one session."""

from __future__ import annotations

from stationaccess.api.client import ReportsApiClient
from stationaccess.cache.queries import ReportQueries
from stationaccess.cache.store import QueryCache
from stationaccess.catalog.stations import StationCatalog
from stationaccess.core.config import Settings
from stationaccess.mutations.pipeline import MutationPipeline
from stationaccess.submission.builder import SubmissionBuilder
from stationaccess.submission.form import ReportForm
from stationaccess.submission.geolocation import GeolocationProvider, create_geolocation_provider
from stationaccess.views.panels import AnalyticsPanel, ReportDetailPanel, ReportListPanel


class AppContext:
    """Everything a client session needs, created together and passed around.

    There is one cache per context. Closing the context cancels outstanding
    fetches and releases the HTTP connection pool.
    """

    def __init__(
        self,
        settings: Settings,
        client: ReportsApiClient,
        cache: QueryCache,
        catalog: StationCatalog,
        geolocation: GeolocationProvider | None,
    ) -> None:
        self.settings = settings
        self.client = client
        self.cache = cache
        self.catalog = catalog
        self.queries = ReportQueries(client, cache, settings.cache)
        self.mutations = MutationPipeline(client, cache)
        self.submissions = SubmissionBuilder(
            self.mutations,
            config=settings.submission,
            geolocation=geolocation,
            catalog=catalog,
        )

    def report_list(self, **kwargs) -> ReportListPanel:
        return ReportListPanel(self.queries, **kwargs)

    def analytics(self, **kwargs) -> AnalyticsPanel:
        return AnalyticsPanel(self.queries, **kwargs)

    def report_detail(self, report_id: int | str | None, **kwargs) -> ReportDetailPanel:
        return ReportDetailPanel(self.queries, report_id, **kwargs)

    def report_form(self, **kwargs) -> ReportForm:
        return ReportForm(self.submissions, **kwargs)

    async def close(self) -> None:
        await self.cache.close()
        await self.client.close()


def create_app_context(
    settings: Settings | None = None,
    *,
    cache: QueryCache | None = None,
    geolocation: GeolocationProvider | None = None,
) -> AppContext:
    """Build an :class:`AppContext`.

    Args:
        settings: Optional pre-built Settings. Defaults to reading the environment.
        cache: Optional pre-built QueryCache (tests pass one with a fake clock).
        geolocation: Optional provider overriding ``settings.geolocation``.
    """
    if settings is None:
        settings = Settings()
    if geolocation is None:
        geolocation = create_geolocation_provider(settings.geolocation)
    return AppContext(
        settings=settings,
        client=ReportsApiClient(settings.api),
        cache=cache or QueryCache(),
        catalog=StationCatalog.load(settings.catalog.stations_path),
        geolocation=geolocation,
    )
