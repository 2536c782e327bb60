from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class CanonicalRow:
    """
    One day of item statistics in the shape the dashboard understands.

    None means "not observed", which is different from zero: item-stats rows
    never report clicks, and a day known only from call stats carries nothing
    but calls.
    """
    date: str
    views: Optional[int] = None
    clicks: Optional[int] = None
    contacts: Optional[int] = None
    calls: int = 0
    sales: Optional[int] = None


@dataclass(frozen=True)
class CallPair:
    date: str
    calls: int


@dataclass
class SeriesBucket:
    """Per-period sums. Unobserved values were counted as zero."""
    date: str
    views: int = 0
    clicks: int = 0
    contacts: int = 0
    calls: int = 0
    sales: int = 0

    def to_dict(self) -> dict:
        return asdict(self)
