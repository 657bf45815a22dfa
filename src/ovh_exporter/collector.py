import asyncio
import time

import structlog

from ovh_exporter.metrics import StorageMetrics
from ovh_exporter.models import MEASUREMENTS, LabelSet, Project, UsageRecord
from ovh_exporter.provider.base import OVHClient
from ovh_exporter.quantity import normalize
from ovh_exporter.usage import fetch_usage

logger = structlog.get_logger()


class Collector:
    """
    Collector is responsible for orchestrating the periodic
    collection of storage usage. Projects are discovered once
    beforehand and fetched sequentially on every cycle; a failing
    project is logged and skipped so it never blocks the others.
    The loop runs until stop() is called, sleeping for the
    configured interval between cycles.
    """

    def __init__(
        self,
        client: "OVHClient",
        projects: "list[Project]",
        metrics: "StorageMetrics",
        interval_seconds: "int" = 60,
        keep_stale_series: "bool" = False,
        log: "structlog.stdlib.BoundLogger | None" = None,
    ) -> "None":
        self._client = client
        self._projects = list(projects)
        self._metrics = metrics
        self._interval = interval_seconds
        self._keep_stale_series = keep_stale_series
        self._log = log or logger
        # project id -> label sets published by the last successful fetch
        self._published: "dict[str, set[LabelSet]]" = {}
        self._stop_event: "asyncio.Event" = asyncio.Event()

    def stop(self) -> "None":
        """
        signals the collector loop to stop after the current cycle.
        """
        self._stop_event.set()

    async def close(self) -> "None":
        """
        closes the API client.
        """
        await self._client.close()

    async def run(self) -> "None":
        """
        runs the main collection loop, starting with an immediate
        cycle. Runs until stop() is called.
        """
        self._metrics.set_projects(len(self._projects))

        while not self._stop_event.is_set():
            await self.run_cycle()

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except TimeoutError:
                pass

    async def run_cycle(self) -> "None":
        self._log.info("collection_cycle_start", projects=len(self._projects))

        for project in self._projects:
            await self._collect_project(project)

        self._log.info("collection_cycle_end")

    async def _collect_project(self, project: "Project") -> "None":
        cycle_start = time.monotonic()
        had_error = False

        # fetching and publishing share one guard so that any failure
        # stays local to this project
        try:
            records = await fetch_usage(self._client, project.id)
            self._publish(project, records)
        except Exception:
            self._log.exception(
                "usage_collect_error",
                project_id=project.id,
                project_name=project.display_name,
            )
            self._metrics.inc_scrape_error(project.display_name)
            had_error = True

        duration = time.monotonic() - cycle_start
        self._metrics.observe_scrape_duration(project.display_name, duration)

        if not had_error:
            self._metrics.set_last_scrape_success(project.display_name, time.time())

    def _publish(self, project: "Project", records: "list[UsageRecord]") -> "None":
        previous = set(self._published.get(project.id, set()))
        # label sets are tracked before being set so that series left
        # by a publish failing half way are cleared on the next cycle
        tracked = self._published.setdefault(project.id, set())
        published: "set[LabelSet]" = set()
        for record in records:
            labels = LabelSet(
                project_name=project.display_name,
                bucket_name=record.bucket_name,
                region=record.region,
                type=record.type,
            )
            tracked.add(labels)
            # each quantity is normalized on its own, a bad one only
            # zeroes its own series
            for kind in MEASUREMENTS:
                normalized = normalize(record.quantity(kind), log=self._log)
                if normalized.degraded:
                    self._metrics.inc_parse_error(kind)
                self._metrics.set(kind, labels, normalized.bytes)
            published.add(labels)

        if not self._keep_stale_series:
            stale = previous - published
            for labels in stale:
                self._metrics.remove(labels)
            if stale:
                self._log.debug(
                    "stale_series_removed",
                    project_id=project.id,
                    count=len(stale),
                )
        self._published[project.id] = published

        self._log.debug(
            "project_usage_collected",
            project_id=project.id,
            buckets=len(published),
        )
