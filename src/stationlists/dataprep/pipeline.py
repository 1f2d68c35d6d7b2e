import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, Union

import pandas as pd

from .. import settings
from ..utils import current_reporting_year
from . import cleaning, feeds, geo, io, parsing, probes, projections

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Holds all configuration paths and knobs."""
    station_list_url: str = settings.STATION_LIST_URL
    state_shape_path: Path = settings.STATE_SHAPE
    state_name_column: str = settings.STATE_NAME_COLUMN
    output_dir: Path = settings.EXTDATA_DIR
    raw_dir: Optional[Path] = settings.RAW_DIR
    reporting_year: Optional[int] = None
    meridian_cutoff: float = geo.MERIDIAN_CUTOFF
    probe_max_workers: int = settings.PROBE_MAX_WORKERS
    probe_timeout: float = settings.PROBE_TIMEOUT
    persist: bool = True
    table_names: Dict[str, str] = field(
        default_factory=lambda: {
            "urls": settings.JSON_URL_TABLE,
            "metadata": settings.STATION_META_TABLE,
        }
    )


class StationListPipeline:
    """
    The Orchestrator Class.
    Coordinates data flow between IO, Parsing, Cleaning, Geo, Feeds,
    Probes and Projections.
    """
    def __init__(
        self,
        config: PipelineConfig,
        boundaries: Optional[geo.StateBoundaries] = None,
        probe: Optional[probes.Probe] = None,
        fetch: Optional[Callable[[str], bytes]] = None,
    ):
        self.cfg = config
        self.boundaries = boundaries
        self.probe = probe
        self.fetch = fetch
        self._owned_probe: Optional[probes.HttpProbe] = None

    def _fetch(self) -> bytes:
        if self.fetch is not None:
            return self.fetch(self.cfg.station_list_url)
        return io.fetch_station_listing(self.cfg.station_list_url, cache_dir=self.cfg.raw_dir)

    def _boundaries(self) -> geo.StateBoundaries:
        if self.boundaries is None:
            self.boundaries = io.load_shapefile(
                self.cfg.state_shape_path, name_column=self.cfg.state_name_column
            )
        return self.boundaries

    def _probe(self) -> probes.Probe:
        if self.probe is not None:
            return self.probe
        if self._owned_probe is None:
            self._owned_probe = probes.HttpProbe(
                timeout=self.cfg.probe_timeout, pool_size=self.cfg.probe_max_workers
            )
        return self._owned_probe

    def _release_probe(self) -> None:
        # only the probe built here is closed, injected ones belong to the caller
        if self._owned_probe is not None:
            self._owned_probe.close()
            self._owned_probe = None

    def run(self, raw: Optional[Union[bytes, str]] = None) -> Dict[str, pd.DataFrame]:
        reporting_year = self.cfg.reporting_year or current_reporting_year()
        try:
            # --- STEP 1: LOAD & PARSE ---
            logger.info(">>> [1/8] Parsing station listing...")
            if raw is None:
                raw = self._fetch()
            df = parsing.parse_station_listing(raw)

            # --- STEP 2: ACTIVE STATIONS ---
            logger.info(f">>> [2/8] Keeping stations active in {reporting_year}...")
            df = cleaning.apply_activity_filter(df, reporting_year)

            # --- STEP 3: SPATIAL VERIFY ---
            logger.info(">>> [3/8] Verifying station states against boundaries...")
            df = geo.correct_locations(df, self._boundaries(), self.cfg.meridian_cutoff)

            # --- STEP 4: STATE CODES ---
            logger.info(">>> [4/8] Assigning feed state codes...")
            df = feeds.assign_region_feed_codes(df)

            # --- STEP 5: URLS ---
            logger.info(">>> [5/8] Building JSON feed URLs...")
            df = feeds.assign_feed_urls(df)

            # --- STEP 6: LIVENESS ---
            logger.info(">>> [6/8] Probing feed URLs...")
            df = probes.validate_feed_urls(df, self._probe(), self.cfg.probe_max_workers)

            # --- STEP 7: PROJECTIONS ---
            logger.info(">>> [7/8] Building output tables...")
            tables = {
                self.cfg.table_names["urls"]: projections.url_projection(df),
                self.cfg.table_names["metadata"]: projections.metadata_projection(df, reporting_year),
            }

            # --- STEP 8: SAVE ---
            if self.cfg.persist:
                logger.info(f">>> [8/8] Saving tables to {self.cfg.output_dir}")
                io.write_projections(
                    tables, self.cfg.output_dir, metadata={"reporting_year": reporting_year}
                )
            else:
                logger.info(">>> [8/8] Persistence disabled, skipping save")

            logger.info(">>> Pipeline Finished Successfully.")
            return tables

        except Exception as e:
            logger.error(f"!!! Pipeline Failed: {e}", exc_info=True)
            raise
        finally:
            self._release_probe()
