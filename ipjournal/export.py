# ipjournal/export.py

from __future__ import annotations
from pathlib import Path
from enum import Enum
from typing import Dict, Union

import pandas as pd

from ipjournal.utils.logging import get_logger

log = get_logger(__name__)


PathLike = Union[str, Path]


class OutputFormat(str, Enum):
    text = "text"
    csv = "csv"


def counts_to_dataframe(counts: Dict[str, int]) -> pd.DataFrame:
    """
    Convert the count mapping to a DataFrame with columns `address`, `count`,
    sorted by count (descending), then address.
    """
    df = pd.DataFrame(
        list(counts.items()),
        columns=["address", "count"],
    )
    if df.empty:
        return df
    df["count"] = df["count"].astype(int)
    return df.sort_values(["count", "address"], ascending=[False, True]).reset_index(drop=True)


def save_text(counts: Dict[str, int], path: PathLike) -> None:
    """One "<address>: <count>" line per entry, in mapping order."""
    out_path = Path(path)
    log.info("Writing results to %s", out_path)
    with out_path.open("w", encoding="utf-8") as f:
        for address, count in counts.items():
            f.write(f"{address}: {count}\n")
    log.debug("Wrote %d entries to %s", len(counts), out_path)


def save_csv(counts: Dict[str, int], path: PathLike) -> None:
    out_path = Path(path)
    log.info("Writing CSV results to %s", out_path)
    counts_to_dataframe(counts).to_csv(out_path, index=False)
    log.debug("Wrote %d entries to %s", len(counts), out_path)


def write_counts(
        counts: Dict[str, int],
        path: PathLike,
        output_format: Union[OutputFormat, str] = OutputFormat.text,
) -> Path:
    """
    Write the count mapping to `path` in the requested format.

    OSError propagates; the CLI reports it.
    """
    output_format = OutputFormat(output_format)  # ValueError for unknown formats
    out_path = Path(path).expanduser()
    if output_format is OutputFormat.csv:
        save_csv(counts, out_path)
    else:
        save_text(counts, out_path)
    return out_path
