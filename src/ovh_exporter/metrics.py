from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

from ovh_exporter.models import MEASUREMENTS, LabelSet

STORAGE_LABELS: "list[str]" = ["project_name", "bucket_name", "region", "type"]

# measurement kind -> (metric name, help)
_STORAGE_GAUGES: "dict[str, tuple[str, str]]" = {
    "incoming_bandwidth": (
        "storage_incoming_bw",
        "Incoming bandwidth for OVH Cloud Project storage",
    ),
    "incoming_internal_bandwidth": (
        "storage_incoming_internal_bw",
        "Incoming internal bandwidth for OVH Cloud Project storage",
    ),
    "outgoing_bandwidth": (
        "storage_outgoing_bw",
        "Outgoing bandwidth for OVH Cloud Project storage",
    ),
    "outgoing_internal_bandwidth": (
        "storage_outgoing_internal_bw",
        "Outgoing internal bandwidth for OVH Cloud Project storage",
    ),
    "stored": (
        "storage_stored",
        "Stored Data for OVH Cloud Project storage",
    ),
}


def create_storage_gauges(
    registry: "CollectorRegistry",
    namespace: "str" = "ovh",
) -> "dict[str, Gauge]":
    """
    creates one gauge per measurement kind, all sharing the
    project_name, bucket_name, region, type label schema.
    """
    return {
        kind: Gauge(
            _STORAGE_GAUGES[kind][0],
            _STORAGE_GAUGES[kind][1],
            STORAGE_LABELS,
            namespace=namespace,
            subsystem="cloud_project_usage",
            registry=registry,
        )
        for kind in MEASUREMENTS
    }


class StorageMetrics:
    """
    holds the storage usage gauges and the exporter's own
    health metrics. Values are written by the collector only;
    prometheus_client synchronizes reads done at scrape time.
    """

    def __init__(
        self,
        registry: "CollectorRegistry",
        namespace: "str" = "ovh",
    ) -> "None":
        self._gauges: "dict[str, Gauge]" = create_storage_gauges(registry, namespace)
        self._scrape_duration: "Histogram" = Histogram(
            "scrape_duration_seconds",
            "Duration of project usage fetches",
            ["project_name"],
            namespace=namespace,
            subsystem="exporter",
            registry=registry,
        )
        self._scrape_errors: "Counter" = Counter(
            "scrape_errors_total",
            "Total number of failed project usage fetches",
            ["project_name"],
            namespace=namespace,
            subsystem="exporter",
            registry=registry,
        )
        self._last_scrape_success: "Gauge" = Gauge(
            "last_scrape_success_timestamp_seconds",
            "Unix timestamp of last successful usage fetch per project",
            ["project_name"],
            namespace=namespace,
            subsystem="exporter",
            registry=registry,
        )
        self._parse_errors: "Counter" = Counter(
            "quantity_parse_errors_total",
            "Total number of usage quantities that could not be parsed",
            ["kind"],
            namespace=namespace,
            subsystem="exporter",
            registry=registry,
        )
        self._projects: "Gauge" = Gauge(
            "projects",
            "Number of discovered cloud projects",
            namespace=namespace,
            subsystem="exporter",
            registry=registry,
        )

    def set(self, kind: "str", labels: "LabelSet", value: "float") -> "None":
        """
        sets the series of the given kind for a label set, creating
        it on first use.
        """
        self._gauges[kind].labels(**labels.as_dict()).set(value)

    def remove(self, labels: "LabelSet") -> "None":
        """
        drops the series of every kind for a label set.
        """
        values = [labels.as_dict()[name] for name in STORAGE_LABELS]
        for gauge in self._gauges.values():
            try:
                gauge.remove(*values)
            except KeyError:
                # never set for this kind
                pass

    def observe_scrape_duration(
        self, project_name: "str", duration_seconds: "float"
    ) -> "None":
        self._scrape_duration.labels(project_name=project_name).observe(
            duration_seconds
        )

    def inc_scrape_error(self, project_name: "str") -> "None":
        self._scrape_errors.labels(project_name=project_name).inc()

    def set_last_scrape_success(
        self, project_name: "str", timestamp: "float"
    ) -> "None":
        self._last_scrape_success.labels(project_name=project_name).set(timestamp)

    def inc_parse_error(self, kind: "str") -> "None":
        self._parse_errors.labels(kind=kind).inc()

    def set_projects(self, count: "int") -> "None":
        self._projects.set(count)
