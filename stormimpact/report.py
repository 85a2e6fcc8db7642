from __future__ import annotations

"""
Storm impact reporter
---------------------
Turns a ranked group table (see `aggregate.py`) into:
- a text table of the top N event types (no row index), and
- a bar chart of the top 10 event types' totals.

Optionally both reports are bundled into a DOCX document.

Design goals:
- Charts suppress x-axis tick labels: event type names are long and there
  are many of them, so each bar gets its own colour and a legend entry.
- Report dependencies (matplotlib, python-docx) are imported lazily, only
  when a chart or document is actually produced.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence
import logging
import os

import numpy as np
import pandas as pd

from .models import EVTYPE, TOTAL, MetricFamily

logger = logging.getLogger(__name__)


# -----------------------------
# Configuration / result types
# -----------------------------

@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Storm Impact Report"
    subtitle: str = "Health and economic consequences of severe weather events in the US"

    # Where the charts are written
    out_dir: str = "figures"
    image_format: str = "png"
    dpi: int = 150

    # How many rows the summary tables show
    table_rows: int = 5

    # How many event types the bar charts show
    chart_groups: int = 10

    # Optional: bundle tables and charts into a Word document
    docx_path: Optional[str] = None


@dataclass
class ImpactReport:
    """Rendered output for one metric family."""
    family: MetricFamily
    table: pd.DataFrame
    table_text: str
    chart_path: str


# -----------------------------
# Tables
# -----------------------------

def _fmt_number(v) -> str:
    if pd.isna(v):
        return ""
    if float(v).is_integer():
        return f"{int(v):,}"
    return f"{float(v):,.2f}"


def top_rows(groups: pd.DataFrame, n: int) -> pd.DataFrame:
    """Return the first `n` ranked groups (all of them if there are fewer)."""
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    return groups.head(n).reset_index(drop=True)


def format_table(groups: pd.DataFrame, n: int) -> str:
    """Render the top `n` groups as text, without the row index."""
    top = top_rows(groups, n)
    if top.empty:
        return top.to_string(index=False)
    return top.to_string(index=False, float_format=_fmt_number)


# -----------------------------
# Charts
# -----------------------------

def draw_bars(ax, data: pd.DataFrame, family: MetricFamily, *, key: str = EVTYPE) -> None:
    """Draw one bar per row of `data` (already ranked and cut) onto `ax`."""
    labels = [str(v) for v in data[key]]
    x = np.arange(len(data))
    bars = ax.bar(x, data[TOTAL].to_numpy(), color=[f"C{i % 10}" for i in range(len(data))])
    for bar, label in zip(bars, labels):
        bar.set_label(label)
    ax.set_xticks([])
    ax.set_xlabel("Event Type")
    ax.set_ylabel(family.ylabel)
    ax.set_title(f"Top {len(data)} {family.title}")
    if labels:
        # right of the axes
        ax.legend(title="Event Type", fontsize="small", loc="upper left", bbox_to_anchor=(1.02, 1.0))


def plot_top_groups(
    groups: pd.DataFrame,
    family: MetricFamily,
    out_path: str,
    *,
    top: int = 10,
    key: str = EVTYPE,
    dpi: int = 150,
) -> str:
    """
    Bar chart of the `top` largest totals, one coloured bar per event type.

    The x-axis tick labels are suppressed; the legend names the categories.
    The file format follows the extension of `out_path`.
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install it with: python -m pip install matplotlib"
        ) from e

    fig, ax = plt.subplots(figsize=(12, 6))
    draw_bars(ax, top_rows(groups, top), family, key=key)

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    fig.tight_layout()
    fig.savefig(out_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    logger.info("Wrote %s chart to %s", family.name, out_path)
    return out_path


def render_report(groups: pd.DataFrame, family: MetricFamily, config: Optional[ReportConfig] = None) -> ImpactReport:
    """Build the table and chart for one metric family."""
    config = config or ReportConfig()
    out_path = os.path.join(config.out_dir, f"{family.filename}.{config.image_format}")
    plot_top_groups(groups, family, out_path, top=config.chart_groups, dpi=config.dpi)
    return ImpactReport(
        family=family,
        table=top_rows(groups, config.table_rows),
        table_text=format_table(groups, config.table_rows),
        chart_path=out_path,
    )


# -----------------------------
# DOCX bundle
# -----------------------------

def generate_docx_report(
    reports: Sequence[ImpactReport],
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
    data_file: Optional[str] = None,
    events_loaded: Optional[int] = None,
    multipliers: Optional[Dict[str, float]] = None,
) -> str:
    """
    Write a DOCX document with one section (table + chart) per report.

    Charts must already exist on disk (see `render_report`). Vector formats
    cannot be embedded by python-docx, so use PNG charts for this.
    """
    config = config or ReportConfig()

    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    if not reports:
        raise ValueError("No reports to write.")

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    if data_file:
        _kv("Dataset", os.path.basename(data_file))
    if events_loaded is not None:
        _kv("Events loaded", f"{events_loaded:,}")

    for rep in reports:
        doc.add_heading(rep.family.title, level=1)
        doc.add_paragraph(f"Top {len(rep.table)} event types by {rep.family.ylabel.lower()}:")
        cols = list(rep.table.columns)
        t = doc.add_table(rows=1, cols=len(cols))
        for i, c in enumerate(cols):
            t.rows[0].cells[i].text = str(c)
        for _, row in rep.table.iterrows():
            cells = t.add_row().cells
            for i, c in enumerate(cols):
                v = row[c]
                cells[i].text = str(v) if c == cols[0] else _fmt_number(v)
        doc.add_paragraph("")
        doc.add_picture(rep.chart_path, width=Inches(6.5))

    # -----------------------------
    # Reproducibility footer
    # -----------------------------
    from . import __version__
    from datetime import datetime as _dt

    doc.add_heading("Reproducibility footer", level=1)
    doc.add_paragraph(f"stormimpact version: {__version__}")
    doc.add_paragraph(f"Report generated at: {_dt.now().isoformat(timespec='seconds')}")
    if multipliers:
        doc.add_paragraph("Damage magnitude codes applied (other codes left unscaled):")
        t2 = doc.add_table(rows=1, cols=2)
        t2.rows[0].cells[0].text = "Code"
        t2.rows[0].cells[1].text = "Multiplier"
        for code, mult in multipliers.items():
            r = t2.add_row().cells
            r[0].text = code
            r[1].text = f"{mult:,.0f}"

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    logger.info("Wrote DOCX report to %s", out_path)
    return out_path
