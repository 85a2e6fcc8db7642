"""
Dataset loader (compressed CSV -> DataFrame)
============================================

This module reads the NOAA storm database export (a bz2-compressed CSV) and
returns a DataFrame holding only the columns the report needs, renamed to the
canonical names in `models.py`.

Key ideas:
- We try multiple possible column names because exports may vary.
- The header is read first, so a missing column fails before the (large)
  body is parsed.
- Every record must have as many fields as the header. pandas pads short
  rows with NaN, so field counts are checked in a separate csv pass.
- Every failure is raised as a `StormDataError` subclass; nothing is
  silently dropped or coerced.
"""

from __future__ import annotations
from typing import Dict, List, Tuple
import bz2
import csv
import gzip
import logging
import lzma
import os
import re

import pandas as pd

from .models import (
    EVTYPE, FATALITIES, INJURIES, PROPDMG, PROPDMGEXP, CROPDMG, CROPDMGEXP,
    NUMERIC_COLUMNS, CODE_COLUMNS, REQUIRED_COLUMNS,
)

logger = logging.getLogger(__name__)

# Accepted header spellings per canonical column, in preference order.
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    EVTYPE: (EVTYPE, "EVENT_TYPE", "Event Type"),
    FATALITIES: (FATALITIES, "DEATHS", "Total Deaths"),
    INJURIES: (INJURIES, "INJURED"),
    PROPDMG: (PROPDMG, "PROPERTY_DAMAGE", "Property Damage"),
    PROPDMGEXP: (PROPDMGEXP, "PROPERTY_DAMAGE_EXP", "Property Damage Exp"),
    CROPDMG: (CROPDMG, "CROP_DAMAGE", "Crop Damage"),
    CROPDMGEXP: (CROPDMGEXP, "CROP_DAMAGE_EXP", "Crop Damage Exp"),
}


class StormDataError(Exception):
    """Base class for every fatal dataset problem."""


class DataFileError(StormDataError, OSError):
    """The file is missing, unreadable, or its compression stream is corrupt."""


class ParseError(StormDataError, ValueError):
    """A row could not be tokenized or a numeric column holds a non-number."""


class SchemaError(StormDataError, KeyError):
    """A required column is absent."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())


def _col(columns: List[str], *names: str) -> str:
    for n in names:
        if n in columns:
            return n
    norm_map = {_norm(c): c for c in columns}
    for n in names:
        nn = _norm(n)
        if nn in norm_map:
            return norm_map[nn]
    raise SchemaError(f"Missing required column. Tried={names}. Available={columns}")


def resolve_columns(columns: List[str]) -> Dict[str, str]:
    """Map each canonical column name to the matching header name.

    Raises:
        SchemaError: if any required column cannot be matched.
    """
    stripped = [str(c).strip() for c in columns]
    return {canon: _col(stripped, *COLUMN_ALIASES[canon]) for canon in REQUIRED_COLUMNS}


def _read_csv(path: str, **kwargs) -> pd.DataFrame:
    try:
        return pd.read_csv(path, compression="infer", **kwargs)
    except pd.errors.ParserError as e:
        raise ParseError(f"{path}: {e}") from e
    except (OSError, EOFError, UnicodeDecodeError) as e:
        raise DataFileError(f"Cannot read {path}: {e}") from e
    except pd.errors.EmptyDataError as e:
        raise SchemaError(f"{path}: no header row") from e


_OPENERS = {".bz2": bz2.open, ".gz": gzip.open, ".xz": lzma.open}


def _open_text(path: str):
    opener = _OPENERS.get(os.path.splitext(path)[1].lower(), open)
    return opener(path, "rt", encoding="utf-8", newline="")


def check_field_counts(path: str) -> int:
    """Verify every record has exactly as many fields as the header.

    Blank lines are skipped, as pandas does. Returns the number of records.

    Raises:
        ParseError: a record has more or fewer fields than the header.
        DataFileError: the file or its compression stream cannot be read.
    """
    records = 0
    try:
        with _open_text(path) as f:
            reader = csv.reader(f)
            header = next(reader, None)
            if header is None:
                return 0
            expected = len(header)
            for row in reader:
                if not row:
                    continue
                if len(row) != expected:
                    raise ParseError(
                        f"{path}: line {reader.line_num}: expected {expected} fields, saw {len(row)}"
                    )
                records += 1
    except csv.Error as e:
        raise ParseError(f"{path}: {e}") from e
    except (OSError, EOFError, UnicodeDecodeError) as e:
        raise DataFileError(f"Cannot read {path}: {e}") from e
    return records


def load_storm_data(path) -> pd.DataFrame:
    """
    Load the storm events file into a DataFrame.

    The result has exactly the columns in `REQUIRED_COLUMNS` (canonical names
    and order). Numeric columns are numbers, missing cells are NaN.
    Magnitude-code columns are strings, missing cells stay NaN.

    Raises:
        DataFileError: missing/unreadable file or corrupt compression.
        SchemaError: a required column is not in the header.
        ParseError: a row with the wrong number of fields, or a non-numeric
            value in a numeric column.
    """
    path = os.fspath(path)
    if not os.path.isfile(path):
        raise DataFileError(f"Dataset not found: {path}")

    logger.info("Loading %s", path)
    header = _read_csv(path, nrows=0)
    raw_names = {str(c).strip(): c for c in header.columns}
    resolved = resolve_columns(list(raw_names))
    check_field_counts(path)

    code_dtypes = {raw_names[resolved[c]]: str for c in CODE_COLUMNS}
    df = _read_csv(path, dtype=code_dtypes)
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)

    df = df[[resolved[c] for c in REQUIRED_COLUMNS]].copy()
    df.columns = list(REQUIRED_COLUMNS)

    for c in NUMERIC_COLUMNS:
        try:
            df[c] = pd.to_numeric(df[c], errors="raise")
        except (ValueError, TypeError) as e:
            raise ParseError(f"{path}: non-numeric value in column {c}: {e}") from e

    logger.info("Loaded %d events from %s", len(df), os.path.basename(path))
    return df
