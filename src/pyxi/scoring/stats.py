"""Aggregates over a rating history."""

from __future__ import annotations

from dataclasses import dataclass
from statistics import fmean, pstdev
from typing import Sequence


@dataclass(frozen=True)
class RatingStats:
    average: float
    matches: int
    std_dev: float


def average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return fmean(values)


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation; 0 below two samples."""

    if len(values) < 2:
        return 0.0
    return pstdev(values)


def compute_stats(values: Sequence[float]) -> RatingStats:
    values = list(values)
    return RatingStats(average=average(values), matches=len(values), std_dev=std_dev(values))
