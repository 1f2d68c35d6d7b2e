"""
Tests for feed state codes and JSON URL composition.
"""
import pandas as pd
import pytest

from stationlists.dataprep.feeds import (
    REGION_FEED_CODES,
    assign_feed_urls,
    assign_region_feed_codes,
    build_feed_url,
    region_feed_code,
)
from stationlists.errors import UnmappedRegionError


@pytest.mark.parametrize(
    "region, code",
    [
        ("NSW", "N"),
        ("NT", "D"),
        ("QLD", "Q"),
        ("SA", "S"),
        ("TAS", "T"),
        ("VIC", "V"),
        ("WA", "W"),
        ("ANT", "T"),
        ("ISL", "T"),
    ],
)
def test_region_feed_code_table(region, code):
    assert region_feed_code(region) == code


def test_island_and_antarctic_share_a_letter():
    assert region_feed_code("ANT") == region_feed_code("ISL")


def test_seven_mainland_letters():
    assert len(set(REGION_FEED_CODES.values())) == 7


@pytest.mark.parametrize("region", ["ACT", "nsw", "", None])
def test_unmapped_region_raises(region):
    with pytest.raises(UnmappedRegionError):
        region_feed_code(region)


def test_assign_region_feed_codes_is_a_fixed_point():
    df = pd.DataFrame({"corrected_region": ["NT", "ANT", "VIC"]})
    once = assign_region_feed_codes(df)
    twice = assign_region_feed_codes(once)
    assert list(once["region_feed_code"]) == ["D", "T", "V"]
    pd.testing.assert_frame_equal(once, twice)


def test_assign_region_feed_codes_raises_on_bad_region():
    df = pd.DataFrame({"corrected_region": ["NT", "XX"]})
    with pytest.raises(UnmappedRegionError):
        assign_region_feed_codes(df)


def test_mainland_url():
    assert build_feed_url("D", "NT", 94120) == "http://www.bom.gov.au/fwo/IDD60801/IDD60801.94120.json"


def test_antarctic_url_uses_antarctic_product():
    assert build_feed_url("T", "ANT", 89564) == "http://www.bom.gov.au/fwo/IDT60803/IDT60803.89564.json"


def test_island_url_uses_mainland_product():
    assert build_feed_url("T", "ISL", 94998) == "http://www.bom.gov.au/fwo/IDT60801/IDT60801.94998.json"


@pytest.mark.parametrize("region", ["NSW", "ANT", "ISL"])
def test_missing_wmo_has_no_url(region):
    code = region_feed_code(region)
    assert build_feed_url(code, region, None) is None
    assert build_feed_url(code, region, pd.NA) is None


def test_assign_feed_urls():
    df = pd.DataFrame(
        {
            "corrected_region": ["NT", "ANT", "SA"],
            "region_feed_code": ["D", "T", "S"],
            "wmo_id": pd.array([94120, 89564, None], dtype="Int64"),
        }
    )
    out = assign_feed_urls(df)
    assert out.loc[0, "feed_url"] == "http://www.bom.gov.au/fwo/IDD60801/IDD60801.94120.json"
    assert out.loc[1, "feed_url"] == "http://www.bom.gov.au/fwo/IDT60803/IDT60803.89564.json"
    assert pd.isna(out.loc[2, "feed_url"])
    assert "feed_url" not in df.columns
