# src/stationlists/dataprep/geo.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import geopandas as gpd
import pandas as pd
from shapely.geometry import Point

from ..errors import UnmappedRegionError

logger = logging.getLogger(__name__)


# Points at or west of this meridian are outside the boundary data's coverage
MERIDIAN_CUTOFF = 80.0

# Territories the state boundaries cannot classify
EXEMPT_REGIONS = frozenset({"ANT", "ISL"})

# ASGS 2016 state/territory names -> BoM state codes.
# "Other Territories" (Jervis Bay, Christmas, Cocos, Norfolk) has no single BoM
# state and counts as unresolved.
STATE_NAME_CODES = {
    "New South Wales": "NSW",
    "Australian Capital Territory": "NSW",
    "Victoria": "VIC",
    "Queensland": "QLD",
    "South Australia": "SA",
    "Western Australia": "WA",
    "Tasmania": "TAS",
    "Northern Territory": "NT",
    "Other Territories": None,
}


class StateBoundaries:
    """
    Point-in-polygon lookup against a state/territory boundary layer.
    Defaults match the ABS ASGS 2016 STE shapefile.
    """

    def __init__(self, gdf: gpd.GeoDataFrame, name_column: str = "STE_NAME16") -> None:
        if name_column not in gdf.columns:
            raise KeyError(f"Boundary layer has no '{name_column}' column")
        if gdf.crs is None:
            gdf = gdf.set_crs("EPSG:4326", allow_override=True)
        if gdf.crs.to_string() != "EPSG:4326":
            gdf = gdf.to_crs("EPSG:4326")

        # ASGS ships placeholder rows ("No usual address") without geometry
        gdf = gdf[gdf.geometry.notna() & ~gdf.geometry.is_empty]
        self.gdf = gdf[[name_column, "geometry"]].reset_index(drop=True)
        self.name_column = name_column

    @classmethod
    def from_file(cls, path: Union[str, Path], name_column: str = "STE_NAME16") -> "StateBoundaries":
        logger.info(f"Loading state boundaries: {path}")
        return cls(gpd.read_file(path), name_column=name_column)

    def locate(self, df: pd.DataFrame) -> pd.Series:
        """
        Returns the boundary name containing each row's coordinates,
        aligned on df's index. Rows without coordinates, or outside every
        polygon, get None.
        """
        names = pd.Series(None, index=df.index, dtype="object")
        has_coords = df["latitude"].notna() & df["longitude"].notna()
        if not has_coords.any():
            return names

        subset = df.loc[has_coords]
        points = gpd.GeoDataFrame(
            index=subset.index,
            geometry=[Point(xy) for xy in zip(subset["longitude"], subset["latitude"])],
            crs="EPSG:4326",
        )
        joined = gpd.sjoin(points, self.gdf, how="left", predicate="within")
        joined = joined[~joined.index.duplicated(keep="first")]

        found = joined[self.name_column]
        names.loc[found.index] = [name if isinstance(name, str) else None for name in found]
        return names

    def lookup(self, latitude: float, longitude: float) -> Optional[str]:
        frame = pd.DataFrame({"latitude": [latitude], "longitude": [longitude]})
        return self.locate(frame).iloc[0]


def state_code(name: str) -> Optional[str]:
    """BoM state code for a boundary name; None when the name maps to no single state."""
    try:
        return STATE_NAME_CODES[name]
    except KeyError:
        raise UnmappedRegionError(name) from None


def resolve_region(declared: Optional[str], derived: Optional[str]) -> Optional[str]:
    """
    Decides which region a station belongs to.

    The coordinate-derived code wins when it is known and disagrees with
    the declared one, unless the declared code is an exempt territory.
    """
    if derived is None:
        return declared
    if declared in EXEMPT_REGIONS:
        return declared
    if derived != declared:
        return derived
    return declared


def correct_locations(
    df: pd.DataFrame,
    boundaries: StateBoundaries,
    meridian_cutoff: float = MERIDIAN_CUTOFF,
) -> pd.DataFrame:
    """
    Reconciles each station's declared state with the one its
    coordinates fall in and stores the outcome in `corrected_region`.
    """
    df = df.copy()
    df["corrected_region"] = df["declared_region"]

    eligible = df["longitude"].gt(meridian_cutoff) & df["latitude"].notna()
    if not eligible.any():
        logger.info("No stations east of the meridian cutoff to verify")
        return df

    logger.info(f"Verifying {int(eligible.sum())} station locations against state boundaries")
    names = boundaries.locate(df.loc[eligible])
    derived = [state_code(name) if isinstance(name, str) else None for name in names]

    declared = df.loc[eligible, "declared_region"]
    corrected = [resolve_region(d, s) for d, s in zip(declared, derived)]
    df.loc[eligible, "corrected_region"] = corrected

    changed = df.loc[eligible & (df["corrected_region"] != df["declared_region"])]
    for row in changed.itertuples():
        logger.info(
            f"Station {row.site_id} ({row.name}): {row.declared_region} -> {row.corrected_region}"
        )
    logger.info(f"Corrected the state of {len(changed)} stations")
    return df
