"""
Unit normalizer (magnitude codes -> absolute dollars)
=====================================================

Damage values in the storm database are stored as a mantissa plus a
magnitude code: `PROPDMG=5, PROPDMGEXP="K"` means $5,000. This module
multiplies each damage column by the power of ten selected by its own code
column, then drops the code columns.

Codes not listed in `MAGNITUDE_MULTIPLIERS` (lowercase letters, blanks,
"?", "+", ...) leave the value unchanged.
"""

from __future__ import annotations
from typing import Dict, Mapping, Sequence, Tuple
import logging

import pandas as pd

from .models import DAMAGE_COLUMNS

logger = logging.getLogger(__name__)

MAGNITUDE_MULTIPLIERS: Dict[str, float] = {
    "K": 1e3,
    "M": 1e6,
    "B": 1e9,
    **{str(d): 10.0 ** d for d in (0, 3, 4, 5, 6, 7)},
}


def normalize_damage(
    df: pd.DataFrame,
    pairs: Sequence[Tuple[str, str]] = DAMAGE_COLUMNS,
    multipliers: Mapping[str, float] = MAGNITUDE_MULTIPLIERS,
) -> pd.DataFrame:
    """Return a copy of `df` with damage values scaled by their codes.

    For every (value column, code column) pair the value is multiplied by
    `multipliers.get(code, 1)`. The code columns are removed from the result,
    so a pair whose code column is already gone is left as it is.
    """
    out = df.copy()
    for value_col, code_col in pairs:
        if code_col not in out.columns:
            logger.debug("%s has no %s column; assuming already normalized", value_col, code_col)
            continue
        codes = out[code_col]
        unknown = int((codes.notna() & ~codes.isin(list(multipliers))).sum())
        if unknown:
            logger.info("%d rows have an unknown %s code; %s left unscaled", unknown, code_col, value_col)
        factor = codes.map(multipliers).fillna(1.0)
        out[value_col] = out[value_col] * factor
    return out.drop(columns=[c for _, c in pairs if c in out.columns])
