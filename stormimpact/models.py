"""
Data model (columns and metric families)
========================================

The loaded dataset is a pandas DataFrame with one row per storm event.
Whatever the header in the source file looks like, the loader renames the
columns we use to the canonical names below.

A `MetricFamily` describes one of the two reports: which columns are summed
per event type, and how the resulting chart and table are labelled. It is
immutable (`frozen=True`) so the two module-level families can be shared
safely by every stage.
"""

from dataclasses import dataclass
from typing import Tuple

EVTYPE = "EVTYPE"
FATALITIES = "FATALITIES"
INJURIES = "INJURIES"
PROPDMG = "PROPDMG"
PROPDMGEXP = "PROPDMGEXP"
CROPDMG = "CROPDMG"
CROPDMGEXP = "CROPDMGEXP"

# Sum of the per-family metric columns, used for ranking.
TOTAL = "TOTAL"

NUMERIC_COLUMNS: Tuple[str, ...] = (FATALITIES, INJURIES, PROPDMG, CROPDMG)
CODE_COLUMNS: Tuple[str, ...] = (PROPDMGEXP, CROPDMGEXP)
REQUIRED_COLUMNS: Tuple[str, ...] = (
    EVTYPE, FATALITIES, INJURIES, PROPDMG, PROPDMGEXP, CROPDMG, CROPDMGEXP,
)

# (value column, magnitude-code column)
DAMAGE_COLUMNS: Tuple[Tuple[str, str], ...] = (
    (PROPDMG, PROPDMGEXP),
    (CROPDMG, CROPDMGEXP),
)


@dataclass(frozen=True)
class MetricFamily:
    """One impact report: the summed columns plus presentation labels."""
    name: str
    title: str
    columns: Tuple[str, ...]
    ylabel: str
    # output file stem for the chart
    filename: str


HEALTH = MetricFamily(
    name="health",
    title="Event Types Most Harmful to Population Health",
    columns=(INJURIES, FATALITIES),
    ylabel="Total Count of Injuries and Fatalities",
    filename="health_impact",
)

FINANCIAL = MetricFamily(
    name="financial",
    title="Event Types with the Greatest Economic Consequences",
    columns=(CROPDMG, PROPDMG),
    ylabel="Total Cost of Damages ($)",
    filename="financial_impact",
)
