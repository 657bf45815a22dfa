from typing import Any

import pytest
from prometheus_client import CollectorRegistry


class FakeClient:
    """
    An in-memory OVHClient answering from a path -> payload map.
    Payloads that are exceptions are raised instead.
    """

    def __init__(self, responses: "dict[str, Any]") -> "None":
        self._responses = responses
        self.calls: "list[str]" = []
        self.closed = False

    async def get(self, path: "str") -> "Any":
        self.calls.append(path)
        if path not in self._responses:
            raise KeyError(path)

        response = self._responses[path]
        if isinstance(response, BaseException):
            raise response
        return response

    async def close(self) -> "None":
        self.closed = True


def storage_entry(
    bucket_name: "str",
    region: "str" = "GRA",
    type: "str" = "storage",
    stored: "tuple[float, str]" = (1.0, "GiBh"),
    bandwidth: "tuple[float, str]" = (0.0, "GiB"),
) -> "dict[str, Any]":
    """
    builds a storage entry as found in hourlyUsage.storage.
    """

    def wrap(quantity: "tuple[float, str]") -> "dict[str, Any]":
        value, unit = quantity
        return {"quantity": {"unit": unit, "value": value}, "totalPrice": 0.0}

    return {
        "bucketName": bucket_name,
        "region": region,
        "type": type,
        "incomingBandwidth": wrap(bandwidth),
        "incomingInternalBandwidth": wrap(bandwidth),
        "outgoingBandwidth": wrap(bandwidth),
        "outgoingInternalBandwidth": wrap(bandwidth),
        "stored": wrap(stored),
    }


@pytest.fixture()
def registry() -> "CollectorRegistry":
    """
    fresh Prometheus registry to avoid cross-test state.
    """
    return CollectorRegistry()
