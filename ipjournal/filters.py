# ipjournal/filters.py

from __future__ import annotations
import ipaddress
import re
from datetime import datetime
from typing import Optional, Union

from ipjournal.errors import InvalidAddressError, InvalidMaskError, InvalidTimeError
from ipjournal.models import FilterParams

FULL_MASK = 0xFFFFFFFF

# dd.MM.yyyy, optionally followed by HH:mm:ss
TIME_FORMATS = ("%d.%m.%Y %H:%M:%S", "%d.%m.%Y")
_TIME_SHAPE = re.compile(r"\d{2}\.\d{2}\.\d{4}(?: \d{2}:\d{2}:\d{2})?", re.ASCII)
_OCTET = re.compile(r"\d{1,3}", re.ASCII)


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parse `dd.MM.yyyy` or `dd.MM.yyyy HH:mm:ss`.

    Returns None when the value has neither shape or names an impossible
    date/time (e.g. 31.02.2020).
    """
    value = value.strip()
    if not _TIME_SHAPE.fullmatch(value):
        return None
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def ip_to_uint(address: Union[str, ipaddress.IPv4Address]) -> int:
    """
    Dotted-decimal IPv4 -> unsigned 32-bit int, first octet most significant.

    Raises ValueError for anything that is not four octets in 0..255.
    """
    if isinstance(address, ipaddress.IPv4Address):
        return int(address)

    octet_str = address.strip().split(".")
    if len(octet_str) != 4 or not all(_OCTET.fullmatch(x) for x in octet_str):
        raise ValueError(f"not an IPv4 address: {address!r}")
    octets = [int(x) for x in octet_str]
    if any(o > 255 for o in octets):
        raise ValueError(f"octet out of range in {address!r}")
    return (
        (octets[0] << 24)
        | (octets[1] << 16)
        | (octets[2] << 8)
        | octets[3]
    )


def mask_from_length(mask_length: int) -> int:
    return ~(FULL_MASK >> mask_length) & FULL_MASK


def build_filter_params(
        address_start: Optional[str] = None,
        address_mask: Optional[str] = None,
        time_start: Optional[str] = None,
        time_end: Optional[str] = None,
) -> FilterParams:
    """
    Validate raw filter strings and turn them into a FilterParams.

    Every argument is optional; None or an empty string disables that filter.
    Fails fast with InvalidAddressError / InvalidMaskError / InvalidTimeError.
    Cross-field combinations (address without mask, start after end) are not
    checked here.
    """
    start_address = None
    if address_start:
        try:
            start_address = ipaddress.IPv4Address(address_start.strip())
        except ValueError:
            raise InvalidAddressError(
                f"Invalid address format: {address_start!r}", param="address-start"
            ) from None

    mask = None
    mask_length = None
    if address_mask:
        try:
            mask_length = int(str(address_mask).strip())
        except ValueError:
            mask_length = None
        if mask_length is None or not 0 < mask_length <= 32:
            raise InvalidMaskError(
                f"Invalid mask length: {address_mask!r} (expected 1..32)",
                param="address-mask",
            )
        mask = mask_from_length(mask_length)

    start_time = None
    if time_start:
        start_time = parse_timestamp(time_start)
        if start_time is None:
            raise InvalidTimeError(
                f"Invalid time format for start bound: {time_start!r} "
                "(expected dd.MM.yyyy or dd.MM.yyyy HH:mm:ss)",
                param="time-start",
            )

    end_time = None
    if time_end:
        end_time = parse_timestamp(time_end)
        if end_time is None:
            raise InvalidTimeError(
                f"Invalid time format for end bound: {time_end!r} "
                "(expected dd.MM.yyyy or dd.MM.yyyy HH:mm:ss)",
                param="time-end",
            )

    return FilterParams(
        start_address=start_address,
        mask=mask,
        mask_length=mask_length,
        start_time=start_time,
        end_time=end_time,
    )
