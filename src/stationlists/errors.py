# src/stationlists/errors.py
from __future__ import annotations


class StationListError(Exception):
    """Base class for all station list build errors."""


class MalformedInputError(StationListError, ValueError):
    """The station listing does not match the known fixed-width layout."""


class UnmappedRegionError(StationListError, KeyError):
    """A region code or boundary name fell outside the known vocabulary."""

    def __init__(self, region) -> None:
        super().__init__(region)
        self.region = region

    def __str__(self) -> str:
        return f"Unmapped region: {self.region!r}"


class ProbeFailure(StationListError):
    """A feed URL could not be checked (timeout, connection error, ...)."""

    def __init__(self, url: str, reason: str = "") -> None:
        super().__init__(f"Probe failed for {url}: {reason}" if reason else f"Probe failed for {url}")
        self.url = url
        self.reason = reason
