# ipjournal/processor.py

from __future__ import annotations
import re
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from ipjournal.errors import InvalidMaskError, IoFailureError
from ipjournal.filters import ip_to_uint, parse_timestamp
from ipjournal.datasources.logfile import iter_lines
from ipjournal.models import FilterParams, LogMatch, RunResult
from ipjournal.utils.logging import get_logger

log = get_logger(__name__)

LINE_PATTERN = re.compile(
    r"(\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})[\s:]+(\d{2}\.\d{2}\.\d{4} \d{2}:\d{2}:\d{2})",
    re.ASCII,
)


def extract_match(line: str) -> Optional[LogMatch]:
    """First address + timestamp pair in the line, or None."""
    match = LINE_PATTERN.search(line)
    if not match:
        return None
    return LogMatch(address=match.group(1), timestamp=match.group(2))


def _check_mask(params: FilterParams) -> None:
    if params.mask is None or params.mask_length is None or not 1 <= params.mask_length <= 32:
        raise InvalidMaskError(
            f"Invalid mask length: {params.mask_length!r} (expected 1..32)",
            param="address-mask",
        )


def process_line(line: str, counts: Dict[str, int], params: FilterParams) -> bool:
    """
    Apply the filters to one raw log line and update `counts` in place.

    Returns True if the address was counted. Lines that do not match, carry
    an unparsable timestamp, or fall outside the window/subnet are dropped.

    Raises InvalidMaskError when a start address is configured without a
    usable mask length; that condition is the same for every line of a run.
    """
    found = extract_match(line)
    if found is None:
        log.warning("Log line does not match the expected pattern: %s", line)
        return False

    timestamp = parse_timestamp(found.timestamp)
    if timestamp is None:
        log.warning("Invalid timestamp in log line: %s", found.timestamp)
        return False

    if params.has_window:
        if params.start_time is not None and timestamp < params.start_time:
            log.debug("Skipping %s at %s: before window start", found.address, timestamp)
            return False
        if params.end_time is not None and timestamp > params.end_time:
            log.debug("Skipping %s at %s: after window end", found.address, timestamp)
            return False

    if params.has_subnet:
        _check_mask(params)
        try:
            observed = ip_to_uint(found.address)
        except ValueError:
            log.warning("Invalid IPv4 address in log line: %s", found.address)
            return False
        if (observed & params.mask) != (ip_to_uint(params.start_address) & params.mask):
            log.debug("Skipping %s: outside %s/%s", found.address, params.start_address, params.mask_length)
            return False

    counts[found.address] = counts.get(found.address, 0) + 1
    return True


def count_lines(
        lines: Iterable[str],
        params: FilterParams,
        counts: Optional[Dict[str, int]] = None,
) -> RunResult:
    """
    Run process_line over `lines` in order.

    An InvalidMaskError ends the batch and is returned as the result's error;
    counts gathered before that point are kept.
    """
    result = RunResult(counts=counts if counts is not None else {})
    for line in lines:
        result.lines_read += 1
        try:
            if process_line(line, result.counts, params):
                result.lines_counted += 1
        except InvalidMaskError as e:
            log.error("Stopping at line %d: %s", result.lines_read, e)
            result.error = e
            break
    return result


def run(log_path: Union[str, Path], params: FilterParams) -> RunResult:
    """
    Read `log_path` and count addresses.

    A read failure does not raise: it is reported in the result, together
    with whatever was counted before it happened.
    """
    log_path = Path(log_path).expanduser()
    log.info("Reading log file %s", log_path)

    counts: Dict[str, int] = {}
    try:
        result = count_lines(iter_lines(log_path), params, counts)
    except OSError as e:
        log.error("Failed to read log file %s: %s", log_path, e)
        return RunResult(
            counts=counts,
            error=IoFailureError(f"Failed to read log file: {e}", param="file-log"),
        )

    log.info(
        "Processed %d lines, counted %d, %d distinct addresses",
        result.lines_read,
        result.lines_counted,
        len(result.counts),
    )
    return result
