"""
Shared fixtures: a small fixed-width station listing, box-shaped state
boundaries and fake feed probes.
"""
import sys
from pathlib import Path

import geopandas as gpd
import pytest
from shapely.geometry import box

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from stationlists.dataprep.geo import StateBoundaries
from stationlists.dataprep.parsing import COLUMN_WIDTHS
from stationlists.errors import ProbeFailure

REPORTING_YEAR = 2024

HEADER = [
    "Bureau of Meteorology product IDCJMC0014.                                   Produced: 02 Jan 2024",
    "",
    "   Site  Dist  Site name                                 Start     End      Lat       Lon Source         STA Height (m)   Bar_ht    WMO",
    "------- ----- ---------------------------------------- ------- ------- -------- --------- -------------- --- ---------- -------- ------",
]


def make_row(site, dist, name, start, end, lat, lon, source, state, height, bar_ht, wmo):
    fields = [site, dist, name, start, end, lat, lon, source, state, height, bar_ht, wmo]
    cells = []
    for i, (value, width) in enumerate(zip(fields, COLUMN_WIDTHS)):
        if i == 2:
            cells.append(str(value).ljust(width))
        else:
            cells.append(str(value).rjust(width - 1) + " ")
    return "".join(cells).rstrip()


def make_listing(rows):
    footer = ["", f"{len(rows)} stations", "", "", "", ""]
    return "\n".join(HEADER + rows + footer) + "\n"


STATION_ROWS = [
    # declared SA but sits in the Northern Territory
    make_row("015590", "15", "ALICE SPRINGS AIRPORT", "1940", "..", "-23.7951", "133.8890", "GPS", "SA", "546.0", "547.0", "94326"),
    make_row("009021", "9", "PERTH AIRPORT", "1944", "..", "-31.9275", "115.9764", "GPS", "WA", "15.4", "19.2", "94610"),
    make_row("300001", "300", "MAWSON", "1954", "..", "-67.6017", "62.8708", "GPS", "ANT", "9.9", "15.0", "89564"),
    make_row("200839", "200", "LORD HOWE ISLAND AERO", "1988", "..", "-31.5382", "159.0773", "GPS", "ISL", "5.0", "6.0", "94995"),
    make_row("023000", "23", "ADELAIDE (WEST TERRACE)", "1839", "..", "-34.9257", "138.5832", "Map", "SA", "29.3", "..", ".."),
    make_row("001000", "1", "KARUNJIE", "1940", "1983", "-16.2919", "127.1956", ".....", "WA", "320.0", "..", ".."),
    make_row("014015", "14", "DARWIN AIRPORT", "1941", "2024", "-12.4239", "130.8925", "GPS", "NT", "30.4", "32.0", "94120"),
]


@pytest.fixture
def listing_text():
    return make_listing(STATION_ROWS)


@pytest.fixture
def listing_bytes(listing_text):
    return listing_text.encode("ascii")


@pytest.fixture
def reporting_year():
    return REPORTING_YEAR


@pytest.fixture
def boundaries_gdf():
    return gpd.GeoDataFrame(
        {
            "STE_NAME16": [
                "Northern Territory",
                "South Australia",
                "Western Australia",
                "New South Wales",
            ]
        },
        geometry=[
            box(129.0, -26.0, 138.0, -10.0),
            box(129.0, -38.0, 141.0, -26.0),
            box(112.0, -36.0, 129.0, -13.0),
            box(141.0, -37.5, 160.0, -28.2),
        ],
        crs="EPSG:4326",
    )


@pytest.fixture
def boundaries(boundaries_gdf):
    return StateBoundaries(boundaries_gdf)


class FakeProbe:
    """Answers from fixed sets of URLs and remembers what it was asked."""

    def __init__(self, live=(), failing=()):
        self.live = set(live)
        self.failing = set(failing)
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        if url in self.failing:
            raise ProbeFailure(url, "timed out")
        return url in self.live


@pytest.fixture
def all_live_probe():
    class _AllLive(FakeProbe):
        def __call__(self, url):
            self.calls.append(url)
            return True

    return _AllLive()
