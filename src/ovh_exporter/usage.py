from typing import Any

from ovh_exporter.models import UsageRecord
from ovh_exporter.provider.base import OVHClient


def parse_usage(data: "Any") -> "list[UsageRecord]":
    """
    extracts the per-bucket storage records from a current usage
    document. Entries without a bucket name are placeholders, not
    measured buckets, and are skipped.
    """
    hourly = (data or {}).get("hourlyUsage") or {}
    return [
        UsageRecord.from_api(entry)
        for entry in hourly.get("storage") or []
        if entry.get("bucketName")
    ]


async def fetch_usage(client: "OVHClient", project_id: "str") -> "list[UsageRecord]":
    """
    fetches the current hourly storage usage of a project.
    """
    data = await client.get(f"/cloud/project/{project_id}/usage/current")
    return parse_usage(data)
