# src/stationlists/dataprep/io.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple, Union

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq
import requests

from .. import __version__
from ..settings import FETCH_TIMEOUT, USER_AGENT
from ..utils import generated_at
from .geo import StateBoundaries

logger = logging.getLogger(__name__)


PathLike = Union[str, Path]

METADATA_PREFIX = "stationlists."
STATION_LISTING_FILENAME = "stations.txt"


def fetch_station_listing(
    url: str,
    cache_dir: Optional[PathLike] = None,
    skip_if_exists: bool = True,
    timeout: float = FETCH_TIMEOUT,
) -> bytes:
    """
    Download the raw station listing.

    Args:
        url: URL of the fixed-width listing
        cache_dir: Optional directory to keep a copy in
        skip_if_exists: Reuse the cached copy instead of downloading again
        timeout: Seconds to wait for the server

    Returns:
        Raw bytes of the listing
    """
    filepath = Path(cache_dir) / STATION_LISTING_FILENAME if cache_dir is not None else None

    if filepath is not None and skip_if_exists and filepath.exists():
        logger.info(f"File already exists, skipping download: {filepath}")
        return filepath.read_bytes()

    logger.info(f"Downloading station listing from {url}")
    try:
        response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Error downloading {url}: {e}")
        raise

    content = response.content
    if filepath is not None:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_bytes(content)
        logger.info(f"Saved station listing to {filepath} ({len(content)} bytes)")
    return content


def load_shapefile(file_path: PathLike, name_column: str = "STE_NAME16") -> StateBoundaries:
    """Loads the state boundary shapefile."""
    try:
        return StateBoundaries.from_file(file_path, name_column=name_column)
    except FileNotFoundError:
        logger.error(f"File not found: {file_path}")
        raise


def _with_metadata(table: pa.Table, metadata: Mapping[str, object]) -> pa.Table:
    merged = dict(table.schema.metadata or {})
    for key, value in metadata.items():
        merged[f"{METADATA_PREFIX}{key}".encode()] = str(value).encode()
    return table.replace_schema_metadata(merged)


def _swap_in(staged: Mapping[Path, Path]) -> None:
    """
    Moves staged files over their final paths. If a rename fails midway the
    tables already swapped are rolled back to their previous versions.
    """
    backups: Dict[Path, Path] = {}
    swapped = []
    try:
        for final_path, tmp_path in staged.items():
            if final_path.exists():
                backup = final_path.with_name(f".{final_path.name}.bak")
                os.replace(final_path, backup)
                backups[final_path] = backup
            os.replace(tmp_path, final_path)
            swapped.append(final_path)
    except OSError as e:
        logger.error(
            f"Replacing tables failed after {[p.name for p in swapped]}: {e}. Restoring previous files"
        )
        for final_path in swapped:
            final_path.unlink(missing_ok=True)
        for final_path, backup in backups.items():
            os.replace(backup, final_path)
        for tmp_path in staged.values():
            tmp_path.unlink(missing_ok=True)
        raise

    for backup in backups.values():
        backup.unlink()


def write_projections(
    tables: Mapping[str, pd.DataFrame],
    output_dir: PathLike,
    metadata: Optional[Mapping[str, object]] = None,
    compression: str = "zstd",
) -> Dict[str, Path]:
    """
    Save each table as `<name>.parquet` in output_dir.

    Every table is written to a temporary file first; nothing replaces the
    existing files unless all of them were written. A failed rename restores
    the previous files.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    metadata = {
        "version": __version__,
        "generated_at": generated_at(),
        **(metadata or {}),
    }

    staged: Dict[Path, Path] = {}
    try:
        for name, df in tables.items():
            final_path = output_dir / f"{name}.parquet"
            tmp_path = output_dir / f".{name}.parquet.tmp"
            staged[final_path] = tmp_path
            logger.info(f"Writing {len(df)} rows to {final_path}")
            table = pa.Table.from_pandas(df, preserve_index=False)
            pq.write_table(_with_metadata(table, metadata), tmp_path, compression=compression)
    except Exception:
        for tmp_path in staged.values():
            tmp_path.unlink(missing_ok=True)
        raise

    _swap_in(staged)
    logger.info(f"Saved {len(staged)} tables to {output_dir}")
    return {path.stem: path for path in staged}


def read_projection(path: PathLike) -> Tuple[pd.DataFrame, Dict[str, str]]:
    """
    Load a saved table.

    Returns:
        The DataFrame and the metadata it was written with
    """
    path = Path(path)
    logger.info(f"Loading Parquet from: {path}")
    table = pq.read_table(path)
    metadata = {
        key.decode()[len(METADATA_PREFIX):]: value.decode()
        for key, value in (table.schema.metadata or {}).items()
        if key.decode().startswith(METADATA_PREFIX)
    }
    return table.to_pandas(), metadata
