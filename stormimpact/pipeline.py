"""
Analysis pipeline
=================

Wires the stages together:

1) Load dataset -> DataFrame of storm events (never modified afterwards)
2) Normalize damage magnitudes -> new DataFrame in absolute dollars
3) Aggregate per event type, once per metric family (health, financial)
4) Report: top-N table + top-10 bar chart per family, optional DOCX bundle

Each stage takes its input as an argument and returns a new value; nothing
is shared through module state.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import logging

import pandas as pd

from .aggregate import aggregate_family
from .loader import load_storm_data
from .models import HEALTH, FINANCIAL
from .normalize import normalize_damage, MAGNITUDE_MULTIPLIERS
from .report import ImpactReport, ReportConfig, render_report, generate_docx_report

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Everything one run produced."""
    events_loaded: int
    health: pd.DataFrame
    financial: pd.DataFrame
    reports: List[ImpactReport]
    docx_path: Optional[str] = None


def run_analysis(path: str, config: Optional[ReportConfig] = None) -> AnalysisResult:
    """Run the whole report on the dataset at `path`.

    Any `StormDataError` raised while loading aborts the run before
    anything is aggregated or rendered.
    """
    config = config or ReportConfig()

    events = load_storm_data(path)
    normalized = normalize_damage(events)

    health = aggregate_family(normalized, HEALTH)
    financial = aggregate_family(normalized, FINANCIAL)

    reports = [
        render_report(health, HEALTH, config),
        render_report(financial, FINANCIAL, config),
    ]

    docx_path = None
    if config.docx_path:
        docx_path = generate_docx_report(
            reports,
            config.docx_path,
            config=config,
            data_file=path,
            events_loaded=len(events),
            multipliers=MAGNITUDE_MULTIPLIERS,
        )

    return AnalysisResult(
        events_loaded=len(events),
        health=health,
        financial=financial,
        reports=reports,
        docx_path=docx_path,
    )
