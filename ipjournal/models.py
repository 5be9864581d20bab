# ipjournal/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from ipaddress import IPv4Address
from typing import Dict, Optional

from ipjournal.errors import IpJournalError


@dataclass(frozen=True)
class FilterParams:
    start_address: Optional[IPv4Address] = None  # subnet prefix address
    mask: Optional[int] = None                   # 32-bit mask, top mask_length bits set
    mask_length: Optional[int] = None            # 1..32 when valid
    start_time: Optional[datetime] = None        # inclusive
    end_time: Optional[datetime] = None          # inclusive

    @property
    def has_window(self) -> bool:
        return self.start_time is not None or self.end_time is not None

    @property
    def has_subnet(self) -> bool:
        return self.start_address is not None


@dataclass(frozen=True)
class LogMatch:
    address: str    # "a.b.c.d" as it appears in the line
    timestamp: str  # "dd.MM.yyyy HH:mm:ss"


@dataclass
class RunResult:
    counts: Dict[str, int] = field(default_factory=dict)
    error: Optional[IpJournalError] = None
    lines_read: int = 0
    lines_counted: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None
