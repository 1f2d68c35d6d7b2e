# src/stationlists/settings.py
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _base_dir() -> Path:
    # STATIONLISTS_HOME wins, then the checkout holding this package, then cwd
    env_home = os.getenv("STATIONLISTS_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()

    checkout = Path(__file__).resolve().parents[2]
    if (checkout / "pyproject.toml").exists():
        return checkout
    return Path.cwd()


BASE_DIR = _base_dir()

# --- Data dirs ---
DATA_DIR = Path(os.getenv("STATIONLISTS_DATA_DIR", str(BASE_DIR / "data")))
RAW_DIR = DATA_DIR / "raw"            # cached stations.txt
EXTERNAL_DIR = DATA_DIR / "external"  # ASGS shapefiles
EXTDATA_DIR = DATA_DIR / "extdata"    # published tables

# --- Inputs ---
STATION_LIST_URL = os.getenv(
    "STATION_LIST_URL",
    "http://www.bom.gov.au/climate/data/lists_by_element/stations.txt",
)
# ABS ASGS 2016 State and Territory boundaries
STATE_SHAPE = Path(os.getenv("STATE_SHAPE", str(EXTERNAL_DIR / "ASGS" / "STE_2016_AUST.shp")))
STATE_NAME_COLUMN = os.getenv("STATE_NAME_COLUMN", "STE_NAME16")

# --- Outputs ---
JSON_URL_TABLE = "JSONurl_site_list"
STATION_META_TABLE = "stations_site_list"

# --- HTTP ---
USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
)
PROBE_MAX_WORKERS = int(os.getenv("PROBE_MAX_WORKERS", "8"))
PROBE_TIMEOUT = float(os.getenv("PROBE_TIMEOUT", "10"))
FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "60"))

LOG_LEVEL = os.getenv("STATIONLISTS_LOG_LEVEL", "INFO").upper()


def ensure_dirs() -> None:
    """Creates the cache and output dirs; the shapefile dir is left to the user."""
    for d in (RAW_DIR, EXTDATA_DIR):
        d.mkdir(parents=True, exist_ok=True)
