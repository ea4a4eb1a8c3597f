"""Main entry point for the repository norms analyzer."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from repo_norms.adapters import AdapterError, get_adapter
from repo_norms.config.environment import EnvironmentConfig
from repo_norms.config.exceptions import ConfigurationError
from repo_norms.config.fields import FieldKind
from repo_norms.config.loader import load_config
from repo_norms.config.models import AppConfig
from repo_norms.logging import get_logger
from repo_norms.logging.config import configure_logging
from repo_norms.logging.context import log_context
from repo_norms.pipeline import AnalysisEngine
from repo_norms.reporting import ReportRenderer, ReportRenderError, ReportWriter

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Args:
        config_path: Path to configuration file (None: search default locations)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if env_config.github_api_url:
        app_config.github = app_config.github.model_copy(
            update={"api_url": env_config.github_api_url.strip().rstrip("/")}
        )

    # Apply log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def resolve_github_source(
    env_config: EnvironmentConfig, org_override: Optional[str]
) -> Tuple[str, str]:
    """
    Organization and token for live GitHub acquisition.

    Raises:
        ConfigurationError: If the token or the organization is missing
    """
    org = org_override or env_config.github_org
    errors: List[str] = []
    if not env_config.github_token:
        errors.append("Missing required environment variable: GITHUB_TOKEN")
    if not org:
        errors.append("No organization given: set GITHUB_ORG or pass --org")
    if errors:
        raise ConfigurationError(
            "GitHub acquisition is not configured",
            errors=errors,
            suggestions=[
                "Set your GitHub token: export GITHUB_TOKEN=your_token_here",
                "Set your organization: export GITHUB_ORG=your_org_name",
                "Use --input to analyze a saved repository snapshot instead",
            ],
        )
    return org, env_config.github_token


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-norms",
        description=(
            "Repository norms analyzer - computes the most common configuration "
            "across an organization's repositories and reports deviations"
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--org",
        default=None,
        help="Organization to analyze (overrides GITHUB_ORG)",
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Analyze a saved JSON/YAML repository snapshot instead of calling GitHub",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for generated reports (overrides report_settings.output_dir)",
    )
    parser.add_argument(
        "--json",
        type=Path,
        default=None,
        dest="json_path",
        help="Also export the analysis result as JSON to this path",
    )
    parser.add_argument(
        "--no-branch-protection",
        action="store_true",
        help="Skip branch protection lookups (protection fields show 'Not fetched')",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the repository norms analyzer.

    Returns:
        Exit code (0 for success, 1 for configuration, acquisition or report errors).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        # Step 1: Load configuration early (before logging for format detection)
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        # Step 2: Configure logging
        log_format = app_config.logging.format if app_config.logging else "key-value"
        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(
            level=env_config.log_level, format_type=log_format, environment=environment
        )

        field_config = app_config.field_config
        logger.info(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "config_path": str(args.config) if args.config else None,
                "field_count": len(field_config),
                "log_level": env_config.log_level,
                "log_format": log_format,
            },
        )

        # Step 3: Build the engine before any record is fetched
        engine = AnalysisEngine(
            field_config,
            deviation_settings=app_config.deviation_settings,
            report_settings=app_config.report_settings,
        )

        protection_fields = (
            [] if args.no_branch_protection else field_config.of_kind(FieldKind.STRUCTURED_PROTECTION)
        )

        # Step 4: Acquire records
        if args.input is not None:
            org = args.org or env_config.github_org or args.input.stem
            adapter = get_adapter(
                "snapshot",
                github_settings=app_config.github,
                report_settings=app_config.report_settings,
                snapshot_path=args.input,
            )
        else:
            org, token = resolve_github_source(env_config, args.org)
            adapter = get_adapter(
                "github",
                github_settings=app_config.github,
                report_settings=app_config.report_settings,
                org=org,
                token=token,
                protection_fields=protection_fields,
            )

        with log_context(org=org):
            records = adapter.fetch_records()
            if not records:
                logger.warning(
                    "No repositories found or all repositories are filtered out",
                    extra={"event": "analysis.skipped", "reason": "no_records"},
                )
                return 0

            # Step 5: Analyze
            result = engine.analyze(records)

            # Step 6: Write reports
            renderer = ReportRenderer(field_config, custom_css=app_config.report_settings.custom_css)
            writer = ReportWriter(
                renderer, app_config.report_settings, output_dir=args.output_dir
            )
            written = writer.write(result, org, generated_at=result.finished_at)
            if args.json_path is not None:
                written.json_export = writer.write_json(result, args.json_path)

            logger.info(
                f"Analysis complete: {result.record_count} repositories, "
                f"{len(result.records_with_deviations)} with deviations",
                extra={
                    "event": "analysis.completed",
                    "record_count": result.record_count,
                    "records_with_deviations": len(result.records_with_deviations),
                    "reports": [str(path) for path in written.paths],
                    "duration_seconds": round(time.time() - start_time, 2),
                },
            )
        return 0

    except ConfigurationError as e:
        # Configuration errors are already formatted nicely
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except AdapterError as e:
        print(f"Error fetching repositories: {e}", file=sys.stderr)
        logger.error(
            f"Repository acquisition failed: {e}",
            extra={"event": "analysis.acquisition.failed", "error_type": type(e).__name__},
        )
        return 1
    except ReportRenderError as e:
        print(f"Error writing reports: {e}", file=sys.stderr)
        logger.error(
            f"Report generation failed: {e}",
            extra={"event": "report.failed", "error_type": type(e).__name__},
        )
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
