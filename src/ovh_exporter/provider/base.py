from typing import Any, Protocol


class OVHClient(Protocol):
    """
    OVHClient stands as the minimal protocol the exporter needs
    from an OVH API client: authenticated GET requests returning
    the decoded JSON body.
    """

    async def get(self, path: "str") -> "Any": ...

    async def close(self) -> "None": ...
