"""
Liveness checks for the candidate JSON feed URLs.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, Optional

import pandas as pd
import requests
from requests.adapters import HTTPAdapter

from ..errors import ProbeFailure
from ..settings import PROBE_MAX_WORKERS, PROBE_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)


Probe = Callable[[str], bool]


class HttpProbe:
    """
    Checks whether a URL is being served with a HEAD request.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = PROBE_TIMEOUT,
        user_agent: str = USER_AGENT,
        pool_size: int = PROBE_MAX_WORKERS,
    ):
        """
        Initialize the probe.

        Args:
            session: Optional session to reuse (one is created otherwise)
            timeout: Seconds to wait for each response
            user_agent: User-Agent header, BoM refuses the requests default
            pool_size: Connections kept per host, match the worker count
        """
        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
        self.session = session
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent}

    def __call__(self, url: str) -> bool:
        """
        Args:
            url: URL to check

        Returns:
            True if the server answered with a non-error status

        Raises:
            ProbeFailure: the request itself failed (timeout, DNS, refused)
        """
        try:
            response = self.session.head(
                url, headers=self.headers, timeout=self.timeout, allow_redirects=True
            )
        except requests.RequestException as e:
            raise ProbeFailure(url, str(e)) from e
        logger.debug(f"HEAD {url} -> {response.status_code}")
        return response.status_code < 400

    def close(self) -> None:
        self.session.close()


def probe_urls(urls: Dict[str, str], probe: Probe, max_workers: int = PROBE_MAX_WORKERS) -> Dict[str, bool]:
    """
    Probes each URL once, keyed by site id. A probe that raises, for any
    reason, counts as unreachable and does not stop the others.
    """
    reachable: Dict[str, bool] = {}
    if not urls:
        return reachable

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(probe, url): site_id for site_id, url in urls.items()}
        for future in as_completed(futures):
            site_id = futures[future]
            try:
                reachable[site_id] = bool(future.result())
            except ProbeFailure as e:
                logger.warning(f"Station {site_id}: {e}")
                reachable[site_id] = False
            except Exception as e:
                logger.warning(f"Station {site_id}: probe of {urls[site_id]} crashed: {e}", exc_info=True)
                reachable[site_id] = False
            if not reachable[site_id]:
                logger.info(f"Station {site_id}: feed not served at {urls[site_id]}")
    return reachable


def validate_feed_urls(
    df: pd.DataFrame,
    probe: Probe,
    max_workers: int = PROBE_MAX_WORKERS,
) -> pd.DataFrame:
    """
    Nulls every `feed_url` that does not answer the probe.
    Results are matched back to stations by `site_id`.
    """
    df = df.copy()
    candidates = df.loc[df["feed_url"].notna(), ["site_id", "feed_url"]]
    urls = dict(zip(candidates["site_id"], candidates["feed_url"]))
    logger.info(f"Probing {len(urls)} feed URLs with {max_workers} workers")

    reachable = probe_urls(urls, probe, max_workers=max_workers)
    keep = df["site_id"].map(lambda site_id: reachable.get(site_id, False)).astype(bool)
    df["feed_url"] = df["feed_url"].where(keep, None)

    logger.info(f"{int(keep.sum())} of {len(urls)} feed URLs are live")
    return df
