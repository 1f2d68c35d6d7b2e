"""
run_pipeline.py
---------------
Entry point script. Rebuilds the JSON URL and station metadata tables.
"""
import argparse
from pathlib import Path

from stationlists import settings
from stationlists.dataprep.pipeline import PipelineConfig, StationListPipeline
from stationlists.utils import setup_logging

# Configure logging to show up in terminal
logger = setup_logging()


def parse_args():
    parser = argparse.ArgumentParser(description="Build BoM station lists")
    parser.add_argument("--output-dir", type=Path, default=settings.EXTDATA_DIR)
    parser.add_argument("--shape", type=Path, default=settings.STATE_SHAPE,
                        help="ASGS 2016 state boundary shapefile")
    parser.add_argument("--reporting-year", type=int, default=None)
    parser.add_argument("--max-workers", type=int, default=settings.PROBE_MAX_WORKERS)
    parser.add_argument("--no-save", action="store_true", help="Build the tables without writing them")
    return parser.parse_args()


def main():
    args = parse_args()
    settings.ensure_dirs()

    # 1. Setup Configuration
    config = PipelineConfig(
        state_shape_path=args.shape,
        output_dir=args.output_dir,
        reporting_year=args.reporting_year,
        probe_max_workers=args.max_workers,
        persist=not args.no_save,
    )

    # 2. Run it
    logger.info(f"Building station lists into {config.output_dir}")
    tables = StationListPipeline(config).run()

    # 3. Verify
    for name, df in tables.items():
        print(f"\n--- {name} ---")
        print(df.head())
        print(f"Total Rows: {len(df)}")


if __name__ == "__main__":
    main()
