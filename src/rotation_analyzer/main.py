"""
Main Entry Point for Rotation Analysis

Loads the configuration, analyzes every rotation for the target year and
prints a summary, optionally exporting the results.
"""

import sys
import argparse
import logging
from pathlib import Path
from datetime import datetime
from typing import List, Optional

from rotation_analyzer.analyzer import ShiftRotationAnalyzer
from rotation_analyzer.config_manager import ConfigManager, ConfigError
from rotation_analyzer.reporting import ExportManager
from rotation_analyzer.weekend_classifier import WeekendPolicy


def setup_logging(log_dir: str = "logs", verbose: bool = False):
    """Setup application logging"""
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    log_file = log_path / f"rotation_analyzer_{datetime.now().strftime('%Y%m%d')}.log"

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout)
        ]
    )

    return logging.getLogger(__name__)


def handle_exception(exc_type, exc_value, exc_traceback):
    """Log the traceback and leave a one-line hint on stderr"""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    logging.getLogger(__name__).critical(
        f"Rotation analysis aborted: {exc_type.__name__}",
        exc_info=(exc_type, exc_value, exc_traceback)
    )
    print(f"rotation-analyzer: {exc_type.__name__}: {exc_value} (details in the log file)",
          file=sys.stderr)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rotation-analyzer",
        description="Compare work/rest shift rotations over a calendar year"
    )
    parser.add_argument("--config", dest="config_file", default=None,
                        help="JSON file with rotations, coverage and settings")
    parser.add_argument("--year", type=int, default=None, help="Target year")
    parser.add_argument("--start-date", dest="start_date", default=None,
                        help="First day of the cycle (YYYY-MM-DD)")
    parser.add_argument("--clean-only", dest="clean_only", action="store_true",
                        help="Count only weekends with two full rest days")
    parser.add_argument("--export-dir", dest="export_dir", default=None,
                        help="Directory for exported reports")
    parser.add_argument("--format", dest="formats", action="append",
                        choices=["pdf", "excel", "csv"],
                        help="Export format (repeatable, default: all)")
    parser.add_argument("--log-dir", dest="log_dir", default="logs")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> bool:
    """Analyze the configured rotations; returns False on configuration or export errors"""
    logger = logging.getLogger(__name__)

    try:
        config = ConfigManager(args.config_file, required=args.config_file is not None)
        if args.year is not None:
            config.set_setting("year", args.year)
            if args.start_date is None:
                config.set_setting("startDate", f"{args.year}-01-01")
        if args.start_date is not None:
            config.set_setting("startDate", args.start_date)
        if args.clean_only:
            config.set_setting("weekendPolicy", WeekendPolicy.CLEAN_ONLY.value)

        year = config.get_year()
        start_date = config.get_start_date()
        weekend_policy = config.get_weekend_policy()
        coverage = config.get_coverage_policy()
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return False

    analyzer = ShiftRotationAnalyzer(year, start_date, coverage, weekend_policy)
    results = analyzer.analyze_rotations(config.get_rotations())

    export_manager = ExportManager(year)
    print(export_manager.report_generator.create_dashboard_summary(results))

    if args.export_dir:
        exported = export_manager.batch_export(results, args.export_dir, args.formats)
        for format_type, success in exported.items():
            if success:
                logger.info(f"Exported {format_type} to {args.export_dir}")
            else:
                logger.error(f"Export to {format_type} failed")
        return all(exported.values())

    return True


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    sys.excepthook = handle_exception

    args = parse_args(argv)
    logger = setup_logging(args.log_dir, args.verbose)
    logger.info("Starting Rotation Analyzer")

    success = run(args)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
