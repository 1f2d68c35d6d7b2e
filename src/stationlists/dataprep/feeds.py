import logging
from typing import Optional

import pandas as pd

from ..errors import UnmappedRegionError

logger = logging.getLogger(__name__)


FEED_BASE_URL = "http://www.bom.gov.au/fwo"

# all-weather observations vs. Antarctic observations
MAINLAND_PRODUCT = "60801"
ANTARCTIC_PRODUCT = "60803"
ANTARCTIC_REGION = "ANT"

REGION_FEED_CODES = {
    "NSW": "N",
    "NT": "D",
    "QLD": "Q",
    "SA": "S",
    "TAS": "T",
    "VIC": "V",
    "WA": "W",
    "ANT": "T",
    "ISL": "T",
}


def region_feed_code(region: str) -> str:
    """Single-letter code BoM uses for a state in its product IDs."""
    try:
        return REGION_FEED_CODES[region]
    except (KeyError, TypeError):
        raise UnmappedRegionError(region) from None


def assign_region_feed_codes(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df["region_feed_code"] = [region_feed_code(region) for region in df["corrected_region"]]
    return df


def build_feed_url(region_code: str, region: str, wmo_id: Optional[int]) -> Optional[str]:
    """
    Composes the JSON observation feed URL of one station.

    Every product/state pair has its own directory and every file in it
    is named `<product id>.<wmo id>.json`, e.g.
    http://www.bom.gov.au/fwo/IDD60801/IDD60801.94120.json
    """
    if wmo_id is None or pd.isna(wmo_id):
        return None
    product = ANTARCTIC_PRODUCT if region == ANTARCTIC_REGION else MAINLAND_PRODUCT
    product_id = f"ID{region_code}{product}"
    return f"{FEED_BASE_URL}/{product_id}/{product_id}.{int(wmo_id)}.json"


def assign_feed_urls(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df["feed_url"] = pd.Series(
        [
            build_feed_url(code, region, wmo)
            for code, region, wmo in zip(df["region_feed_code"], df["corrected_region"], df["wmo_id"])
        ],
        index=df.index,
        dtype="object",
    )
    logger.info(f"Built {int(df['feed_url'].notna().sum())} candidate feed URLs")
    return df
