# src/stationlists/dataprep/parsing.py
from __future__ import annotations

import io
import logging
from typing import List, Union

import pandas as pd

from ..errors import MalformedInputError

logger = logging.getLogger(__name__)


# Layout of BoM product IDCJMC0014 (stations.txt)
HEADER_LINES = 4
FOOTER_LINES = 6

RAW_COLUMNS: List[str] = [
    "site", "dist", "name", "start", "end", "lat",
    "lon", "source", "state", "height", "bar_ht", "wmo",
]
COLUMN_WIDTHS: List[int] = [8, 6, 41, 8, 8, 9, 10, 15, 4, 11, 9, 7]

RENAME_MAP = {
    "site": "site_id",
    "dist": "district_id",
    "name": "name",
    "start": "start_period",
    "end": "end_period",
    "lat": "latitude",
    "lon": "longitude",
    "state": "declared_region",
    "height": "elevation",
    "bar_ht": "barometer_height",
    "wmo": "wmo_id",
}

INTEGER_COLUMNS = ["start", "end", "wmo"]
FLOAT_COLUMNS = ["lat", "lon", "height", "bar_ht"]

PLACEHOLDERS = frozenset({"", "..", "...", "....."})


def _decode(raw: Union[bytes, str]) -> str:
    if isinstance(raw, bytes):
        return raw.decode("ascii", errors="replace")
    return raw


def _empty_frame() -> pd.DataFrame:
    df = pd.DataFrame({col: pd.Series(dtype="object") for col in RENAME_MAP})
    return _coerce_columns(df)


def _coerce_numeric(series: pd.Series, column: str) -> pd.Series:
    """Coerce a stripped string column, failing loudly on unknown tokens."""
    values = pd.to_numeric(series, errors="coerce")
    bad = series.notna() & values.isna()
    if bad.any():
        tokens = sorted(set(series[bad].astype(str)))[:5]
        raise MalformedInputError(
            f"Column '{column}' holds non-numeric values: {tokens}"
        )
    return values


def _coerce_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    for col in INTEGER_COLUMNS:
        values = _coerce_numeric(df[col], col)
        fractional = values.notna() & (values % 1 != 0)
        if fractional.any():
            raise MalformedInputError(f"Column '{col}' holds non-integer values")
        df[col] = values.astype("Int64")
    for col in FLOAT_COLUMNS:
        df[col] = _coerce_numeric(df[col], col).astype("float64")
    for col in ["site", "dist", "name", "state"]:
        df[col] = df[col].astype("object")
    return df


def read_fixed_width(text: str) -> pd.DataFrame:
    """
    Slices the header and trailing block off the listing and reads the
    remaining lines as raw string columns.
    """
    lines = text.splitlines()
    if len(lines) < FOOTER_LINES:
        raise MalformedInputError(
            f"Station listing has {len(lines)} lines, fewer than the "
            f"{FOOTER_LINES}-line trailing block"
        )

    body = lines[HEADER_LINES:len(lines) - FOOTER_LINES]
    body = [line for line in body if line.strip()]
    if not body:
        logger.warning("Station listing contains no data lines")
        return pd.DataFrame(columns=RAW_COLUMNS, dtype="object")

    df = pd.read_fwf(
        io.StringIO("\n".join(body)),
        widths=COLUMN_WIDTHS,
        names=RAW_COLUMNS,
        header=None,
        dtype=str,
        na_filter=False,
    )
    return df


def normalize_placeholders(df: pd.DataFrame) -> pd.DataFrame:
    """Strips every field and turns placeholder tokens ('..', '.....', blank) into NA."""
    df = df.copy()
    for col in df.columns:
        # short lines leave trailing fields as NaN
        stripped = df[col].fillna("").astype(str).str.strip()
        df[col] = stripped.mask(stripped.isin(PLACEHOLDERS))
    return df


def check_site_ids(df: pd.DataFrame) -> None:
    missing = df["site_id"].isna()
    if missing.any():
        raise MalformedInputError(f"{int(missing.sum())} station rows have no site number")

    duplicated = df["site_id"].duplicated(keep=False)
    if duplicated.any():
        sites = sorted(df.loc[duplicated, "site_id"].unique())[:5]
        raise MalformedInputError(f"Duplicated site numbers in station listing: {sites}")


def parse_station_listing(raw: Union[bytes, str]) -> pd.DataFrame:
    """
    Parses the BoM fixed-width station listing into typed station records.

    The source-attribution column is dropped and `corrected_region` starts
    out equal to `declared_region`.
    """
    text = _decode(raw)
    df = read_fixed_width(text)
    if df.empty:
        df = _empty_frame()
    else:
        df = normalize_placeholders(df)
        df = df.drop(columns=["source"])
        df = _coerce_columns(df)

    df = df.rename(columns=RENAME_MAP)
    check_site_ids(df)

    df["corrected_region"] = df["declared_region"]
    df = df.reset_index(drop=True)
    logger.info(f"Parsed {len(df)} stations from listing")
    return df
