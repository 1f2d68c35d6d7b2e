import logging
from typing import Optional

import pandas as pd

from ..utils import current_reporting_year

logger = logging.getLogger(__name__)


def fill_missing_end_period(df: pd.DataFrame, reporting_year: int) -> pd.DataFrame:
    """Stations without an end year are still reporting."""
    df = df.copy()
    missing = df["end_period"].isna()
    logger.info(f"Setting end year {reporting_year} on {int(missing.sum())} open stations")
    df["end_period"] = df["end_period"].fillna(reporting_year).astype("Int64")
    return df


def is_active(df: pd.DataFrame, reporting_year: int) -> pd.Series:
    return df["end_period"].eq(reporting_year).fillna(False).astype(bool)


def filter_active(df: pd.DataFrame, reporting_year: int) -> pd.DataFrame:
    """Keeps only stations whose end year is the reporting year."""
    active = df[is_active(df, reporting_year)].copy()
    logger.info(f"Dropped {len(df) - len(active)} closed stations, {len(active)} remain")
    return active.reset_index(drop=True)


def apply_activity_filter(df: pd.DataFrame, reporting_year: Optional[int] = None) -> pd.DataFrame:
    """
    Resolves open end years and drops stations that stopped reporting.

    With no `reporting_year` the wall-clock year is used, so the result
    moves when the calendar year changes.
    """
    if reporting_year is None:
        reporting_year = current_reporting_year()
    df = fill_missing_end_period(df, reporting_year)
    return filter_active(df, reporting_year)
