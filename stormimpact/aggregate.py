"""
Aggregator (group by event type, sum, rank)
===========================================

One output row per event type, holding the summed metric columns and their
`TOTAL`, ranked by `TOTAL` descending.

Ordering rules:
- groups are first collected in the order their label first appears;
- the ranking sort is stable (merge sort), so equal totals keep that order.
"""

from __future__ import annotations
from typing import Sequence
import logging

import pandas as pd

from .loader import SchemaError
from .models import EVTYPE, TOTAL, MetricFamily

logger = logging.getLogger(__name__)


def aggregate_by(
    df: pd.DataFrame,
    key: str,
    columns: Sequence[str],
    total_column: str = TOTAL,
) -> pd.DataFrame:
    """Sum `columns` per distinct `key` value and rank by their total.

    Missing values count as zero. A missing key value forms its own group.

    Returns:
        DataFrame with columns [key, *columns, total_column] and a 0..n-1 index.
    """
    columns = list(columns)
    if not columns:
        raise ValueError("aggregate_by needs at least one column to sum")
    missing = [c for c in [key, *columns] if c not in df.columns]
    if missing:
        raise SchemaError(f"Cannot aggregate, missing columns: {missing}")

    grouped = df.groupby(key, sort=False, dropna=False)[columns].sum(min_count=0)
    grouped[total_column] = grouped[columns].sum(axis=1)
    grouped = grouped.sort_values(total_column, ascending=False, kind="mergesort")
    return grouped.reset_index()


def aggregate_family(df: pd.DataFrame, family: MetricFamily, key: str = EVTYPE) -> pd.DataFrame:
    """Apply `aggregate_by` with the columns of one metric family."""
    groups = aggregate_by(df, key, family.columns)
    logger.info("%s: %d event types aggregated", family.name, len(groups))
    return groups
