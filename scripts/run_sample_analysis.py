#!/usr/bin/env python3
"""Sample analysis harness for end-to-end validation.

Runs the analysis engine over a saved repository snapshot and prints the norms
and per-repository deviations, without calling the GitHub API.

Usage:
    # Analyze the bundled fixture snapshot with default settings
    python scripts/run_sample_analysis.py

    # Custom snapshot and configuration, also writing the HTML reports
    python scripts/run_sample_analysis.py --snapshot repos.json --config config.yaml --reports out
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from repo_norms.adapters import AdapterError, SnapshotAdapter
from repo_norms.analysis import topic_of
from repo_norms.config.exceptions import ConfigurationError
from repo_norms.config.loader import load_app_config
from repo_norms.logging.config import configure_logging
from repo_norms.pipeline import AnalysisEngine
from repo_norms.reporting import ReportRenderer, ReportWriter, format_value


def print_header(title: str):
    """Print a formatted section header."""
    width = 80
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width + "\n")


def print_norms_table(result):
    """Print a formatted table of field norms and deviation counts."""
    print_header("Configuration Norms")

    counts = result.deviation_counts()
    rows = [
        (name, format_value(result.norms[name]).replace("\n", " "), counts.get(name, 0))
        for name in result.field_names
    ]
    label_width = max(len(name) for name, _, _ in rows)

    print("┌" + "─" * (label_width + 2) + "┬" + "─" * 42 + "┬" + "─" * 11 + "┐")
    print(f"│ {'Field':<{label_width}} │ {'Norm':<40} │ {'Deviating':<9} │")
    print("├" + "─" * (label_width + 2) + "┼" + "─" * 42 + "┼" + "─" * 11 + "┤")
    for name, norm, count in rows:
        if len(norm) > 40:
            norm = norm[:37] + "..."
        print(f"│ {name:<{label_width}} │ {norm:<40} │ {count:<9} │")
    print("└" + "─" * (label_width + 2) + "┴" + "─" * 42 + "┴" + "─" * 11 + "┘")


def print_deviations(result):
    """Print the deviating fields of every repository."""
    print_header("Deviations")

    if not result.records_with_deviations:
        print("No repository deviates from the norms.")
        return

    for record in result.records_with_deviations:
        print(f"Repository: {record.identity.full_name}")
        for field_name, entry in record.deviations.items():
            line = f"  {field_name}: {format_value(entry.repo)} (norm: {format_value(entry.norm)})"
            print(line.replace("\n", " "))
            if entry.missing is not None:
                missing = ", ".join(str(topic_of(element)) for element in entry.missing)
                print(f"    missing: {missing or '-'}")
                print(f"    extra: {', '.join(str(topic) for topic in entry.extra) or '-'}")
        print()


def main():
    """Main entry point for the sample analysis harness."""
    parser = argparse.ArgumentParser(
        description="Run a sample analysis over a repository snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=Path("tests/fixtures/sample_repos.json"),
        help="Repository snapshot (default: tests/fixtures/sample_repos.json)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file (default: built-in defaults)",
    )
    parser.add_argument(
        "--reports",
        type=Path,
        default=None,
        help="Also write the HTML reports into this directory",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: WARNING)",
    )
    args = parser.parse_args()

    print_header("Repository Norms - Sample Analysis Harness")
    print(f"Snapshot: {args.snapshot}")
    print(f"Configuration: {args.config or 'built-in defaults'}")

    try:
        app_config = load_app_config(args.config)
        configure_logging(
            level=args.log_level,
            format_type=app_config.logging.format,
            environment="validation",
        )

        records = SnapshotAdapter(
            args.snapshot,
            include_archived=app_config.report_settings.include_archived,
        ).fetch_records()
        print(f"✓ Loaded {len(records)} repositories")

        engine = AnalysisEngine(
            app_config.field_config,
            deviation_settings=app_config.deviation_settings,
            report_settings=app_config.report_settings,
        )
        result = engine.analyze(records)

        print_norms_table(result)
        print_deviations(result)

        if args.reports is not None:
            renderer = ReportRenderer(app_config.field_config)
            writer = ReportWriter(renderer, app_config.report_settings, output_dir=args.reports)
            written = writer.write(result, args.snapshot.stem)
            for path in written.paths:
                print(f"✓ Report written: {path}")

        return 0

    except ConfigurationError as e:
        print(f"\n❌ Configuration error:\n{e}")
        return 1
    except AdapterError as e:
        print(f"\n❌ Could not load snapshot: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
