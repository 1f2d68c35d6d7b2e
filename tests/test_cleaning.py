"""
Tests for the activity filter.
"""
import pandas as pd

from stationlists.dataprep.cleaning import (
    apply_activity_filter,
    fill_missing_end_period,
    filter_active,
)
from stationlists.dataprep.parsing import parse_station_listing


def test_open_stations_get_reporting_year(listing_text, reporting_year):
    df = fill_missing_end_period(parse_station_listing(listing_text), reporting_year)
    assert df["end_period"].notna().all()
    assert df.set_index("site_id").loc["015590", "end_period"] == reporting_year


def test_closed_stations_dropped(listing_text, reporting_year):
    df = apply_activity_filter(parse_station_listing(listing_text), reporting_year)
    assert "001000" not in set(df["site_id"])
    assert (df["end_period"] == reporting_year).all()
    assert len(df) == 6


def test_station_ending_in_reporting_year_kept(listing_text, reporting_year):
    df = apply_activity_filter(parse_station_listing(listing_text), reporting_year)
    assert "014015" in set(df["site_id"])


def test_next_year_drops_stations_that_stopped(listing_text, reporting_year):
    parsed = parse_station_listing(listing_text)
    df = apply_activity_filter(parsed, reporting_year + 1)
    assert "014015" not in set(df["site_id"])


def test_filter_does_not_mutate_input(listing_text, reporting_year):
    parsed = parse_station_listing(listing_text)
    apply_activity_filter(parsed, reporting_year)
    assert parsed["end_period"].isna().any()


def test_filter_active_ignores_missing_end():
    df = pd.DataFrame({"end_period": pd.array([2024, None, 1990], dtype="Int64")})
    assert len(filter_active(df, 2024)) == 1
