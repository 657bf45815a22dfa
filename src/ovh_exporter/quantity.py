import math
import re

import structlog

from ovh_exporter.models import NormalizedQuantity, Quantity

logger = structlog.get_logger()

# "<number> <scale letter><i><b>", every part of the suffix is optional
_SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?) ?([kmgtp])?(i)?(b)?$", re.IGNORECASE)

_SCALES: "dict[str, int]" = {"k": 1, "m": 2, "g": 3, "t": 4, "p": 5}

# the API suffixes hourly billed units with "h" (e.g. "GiBh")
HOURLY_SUFFIX = "h"


class InvalidSizeError(ValueError):
    pass


def from_human_size(size: "str") -> "int":
    """
    parses a human-readable size ("2.000000 GB", "512 KiB", "10")
    into bytes. SI suffixes use a base of 1000 and binary
    suffixes (with the "i" marker) a base of 1024.
    """
    match = _SIZE_RE.match(size.strip())
    if match is None:
        raise InvalidSizeError(f"invalid size: {size!r}")

    number, scale, binary, _ = match.groups()
    multiplier = 1
    if scale:
        base = 1024 if binary else 1000
        multiplier = base ** _SCALES[scale.lower()]
    elif binary:
        # "iB" without a scale letter
        raise InvalidSizeError(f"invalid size: {size!r}")

    size_bytes = float(number) * multiplier
    if not math.isfinite(size_bytes):
        raise InvalidSizeError(f"size out of range: {size!r}")

    return int(size_bytes)


def normalize(
    quantity: "Quantity",
    log: "structlog.stdlib.BoundLogger | None" = None,
) -> "NormalizedQuantity":
    """
    converts a quantity into an absolute byte count. The hourly
    marker only tells the billing period so it is stripped before
    parsing. Malformed quantities never raise: they are logged and
    reported as zero bytes with the degraded flag set.
    """
    log = log or logger
    unit = quantity.unit.strip()
    if unit.endswith(HOURLY_SUFFIX):
        unit = unit[: -len(HOURLY_SUFFIX)]

    if not math.isfinite(quantity.value) or quantity.value < 0:
        log.warning(
            "quantity_parse_error",
            unit=quantity.unit,
            value=quantity.value,
            error="value must be a finite non-negative number",
        )
        return NormalizedQuantity(bytes=0, degraded=True)

    try:
        size = from_human_size(f"{quantity.value:f} {unit}")
    except InvalidSizeError as e:
        log.warning(
            "quantity_parse_error",
            unit=quantity.unit,
            value=quantity.value,
            error=str(e),
        )
        return NormalizedQuantity(bytes=0, degraded=True)

    return NormalizedQuantity(bytes=size)
