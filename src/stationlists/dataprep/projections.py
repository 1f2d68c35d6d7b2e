import logging
from typing import Optional

import pandas as pd

from ..utils import current_reporting_year
from .cleaning import is_active

logger = logging.getLogger(__name__)


URL_DROP_COLUMNS = ["declared_region"]
METADATA_DROP_COLUMNS = ["declared_region", "region_feed_code", "feed_url"]


def strip_zero_padding(site_id: str) -> str:
    """'001000' -> '1000'; an all-zero id keeps a single '0'."""
    return site_id.lstrip("0") or "0"


def url_projection(df: pd.DataFrame) -> pd.DataFrame:
    """Stations with a live JSON feed."""
    data = df[df["feed_url"].notna()].copy()
    data = data.drop(columns=URL_DROP_COLUMNS, errors="ignore")
    logger.info(f"JSON URL table: {len(data)} stations")
    return data.reset_index(drop=True)


def metadata_projection(df: pd.DataFrame, reporting_year: Optional[int] = None) -> pd.DataFrame:
    """Metadata of the stations still reporting in `reporting_year`."""
    if reporting_year is None:
        reporting_year = current_reporting_year()
    data = df[is_active(df, reporting_year)].copy()
    data = data.drop(columns=METADATA_DROP_COLUMNS, errors="ignore")
    data["site_id"] = data["site_id"].map(strip_zero_padding)
    logger.info(f"Station metadata table: {len(data)} stations active in {reporting_year}")
    return data.reset_index(drop=True)
