from dataclasses import dataclass
from typing import Any

# measurement kinds, each one is also the UsageRecord
# attribute holding the matching quantity
MEASUREMENTS: "tuple[str, ...]" = (
    "incoming_bandwidth",
    "incoming_internal_bandwidth",
    "outgoing_bandwidth",
    "outgoing_internal_bandwidth",
    "stored",
)


@dataclass(frozen=True, slots=True)
class Project:
    """
    Project represents a single OVH Public Cloud project.
    """

    id: "str"
    display_name: "str"

    @classmethod
    def from_api(cls, data: "dict[str, Any]", project_id: "str" = "") -> "Project":
        return cls(
            id=str(data.get("project_id") or project_id),
            display_name=str(data.get("projectName") or ""),
        )


@dataclass(frozen=True, slots=True)
class Quantity:
    """
    Quantity is a human-readable magnitude as returned by
    the API, e.g. value=2.0 unit="GiBh".
    """

    unit: "str"
    value: "float"

    @classmethod
    def from_api(cls, data: "dict[str, Any] | None") -> "Quantity":
        data = data or {}
        return cls(
            unit=str(data.get("unit") or ""),
            value=float(data.get("value") or 0.0),
        )


@dataclass(frozen=True, slots=True)
class NormalizedQuantity:
    """
    NormalizedQuantity is the byte count of a Quantity. degraded
    is set when the quantity could not be parsed and bytes
    defaulted to zero.
    """

    bytes: "int"
    degraded: "bool" = False


@dataclass(frozen=True, slots=True)
class UsageRecord:
    """
    UsageRecord represents the hourly usage of a single
    storage bucket of a project.
    """

    bucket_name: "str"
    region: "str"
    type: "str"
    incoming_bandwidth: "Quantity"
    incoming_internal_bandwidth: "Quantity"
    outgoing_bandwidth: "Quantity"
    outgoing_internal_bandwidth: "Quantity"
    stored: "Quantity"

    @classmethod
    def from_api(cls, data: "dict[str, Any]") -> "UsageRecord":
        # bandwidth and stored entries wrap the quantity next to
        # its price, only the quantity is kept
        def quantity(key: "str") -> "Quantity":
            return Quantity.from_api((data.get(key) or {}).get("quantity"))

        return cls(
            bucket_name=str(data.get("bucketName") or ""),
            region=str(data.get("region") or ""),
            type=str(data.get("type") or ""),
            incoming_bandwidth=quantity("incomingBandwidth"),
            incoming_internal_bandwidth=quantity("incomingInternalBandwidth"),
            outgoing_bandwidth=quantity("outgoingBandwidth"),
            outgoing_internal_bandwidth=quantity("outgoingInternalBandwidth"),
            stored=quantity("stored"),
        )

    def quantity(self, kind: "str") -> "Quantity":
        return getattr(self, kind)


@dataclass(frozen=True, slots=True)
class LabelSet:
    """
    LabelSet identifies one time series within a
    measurement kind.
    """

    project_name: "str"
    bucket_name: "str"
    region: "str"
    type: "str"

    def as_dict(self) -> "dict[str, str]":
        return {
            "project_name": self.project_name,
            "bucket_name": self.bucket_name,
            "region": self.region,
            "type": self.type,
        }
