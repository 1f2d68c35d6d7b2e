__all__ = [
    "parse_station_listing",
    "apply_activity_filter",
    "StateBoundaries",
    "correct_locations",
    "assign_region_feed_codes",
    "assign_feed_urls",
    "HttpProbe",
    "validate_feed_urls",
    "url_projection",
    "metadata_projection",
    "PipelineConfig",
    "StationListPipeline",
]

from .parsing import parse_station_listing
from .cleaning import apply_activity_filter
from .geo import StateBoundaries, correct_locations
from .feeds import assign_region_feed_codes, assign_feed_urls
from .probes import HttpProbe, validate_feed_urls
from .projections import url_projection, metadata_projection
from .pipeline import PipelineConfig, StationListPipeline
