"""CLI for benchreport."""

import argparse
import json
import logging
import sys
from pathlib import Path

from benchreport.clients import APIError, CodSpeedAPIClient, RunNotFoundError, SessionExpiredError
from benchreport.config import AppConfig, load_config_from_yaml
from benchreport.report import (
    BenchmarkResult,
    aggregate_results,
    entries_to_frame,
    parse_results,
    render_markdown_report,
    save_aggregated_results,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_API_ERROR = 1
EXIT_SESSION_EXPIRED = 2
EXIT_NOT_FOUND = 3
EXIT_BAD_CONFIG = 4
EXIT_BAD_INPUT = 5


def load_config(args) -> AppConfig:
    """Build the AppConfig from --config (if any) and command-line overrides."""
    overrides = {
        "owner": getattr(args, "owner", None),
        "name": getattr(args, "name", None),
        "report_title": getattr(args, "title", None),
        "output_path": getattr(args, "output", None),
    }
    if args.config:
        return load_config_from_yaml(args.config, **overrides)
    return AppConfig(**{k: v for k, v in overrides.items() if v is not None})


class ResultsFileError(Exception):
    """A saved results file could not be read or has the wrong shape."""


def load_results_file(path: Path) -> list:
    """Load results saved as the service's ``results`` list."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ResultsFileError(f"Cannot read results file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ResultsFileError(f"Results file {path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("results", [])
    if not isinstance(data, list):
        raise ResultsFileError(f"Results file {path} must hold a list of results")

    results = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ResultsFileError(f"Result #{index} in {path} is not an object")
        try:
            results.append(BenchmarkResult.from_api(item))
        except (TypeError, ValueError, AttributeError) as e:
            raise ResultsFileError(f"Result #{index} in {path} is malformed: {e}") from e
    return results


def _require_repository(config: AppConfig):
    if not config.owner or not config.name:
        raise ValueError("Repository owner and name are required (--owner/--name or config file)")


def fetch_results(config: AppConfig, run_id=None) -> tuple:
    """Fetch the results of ``run_id`` or of the latest finished run."""
    _require_repository(config)
    client = CodSpeedAPIClient.from_config(config)

    if run_id is None:
        latest = client.get_latest_finished_run(config.owner, config.name)
        if latest is None:
            raise RunNotFoundError(f"No finished run found for {config.repository}")
        run_id = latest.id
        logger.info(f"Using latest finished run {run_id} ({latest.date})")

    run = client.fetch_run_report(config.owner, config.name, run_id)
    return run.results, run.url


def cmd_report(args, config: AppConfig) -> int:
    """Generate benchmark report."""
    if args.input:
        results, source = load_results_file(args.input), str(args.input)
    else:
        results, source = fetch_results(config, args.run_id)

    entries = parse_results(results)
    if len(entries) < len(results):
        logger.warning(f"Ignored {len(results) - len(entries)} result(s) with malformed identifiers")

    report_md = render_markdown_report(aggregate_results(entries), title=config.report_title)

    config.output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config.output_path, "w", encoding="utf-8") as f:
        f.write(report_md)

    if args.save_results:
        save_aggregated_results(entries_to_frame(entries), args.save_results)

    print(f"✓ Report generated: {config.output_path}")
    print(f"  - Source: {source}")
    print(f"  - Benchmarks: {len(entries)}")
    return EXIT_OK


def cmd_latest(args, config: AppConfig) -> int:
    """Print the latest finished run."""
    _require_repository(config)
    client = CodSpeedAPIClient.from_config(config)
    run = client.get_latest_finished_run(config.owner, config.name)
    if run is None:
        raise RunNotFoundError(f"No finished run found for {config.repository}")
    print(f"{run.id}\t{run.date}\t{run.status.value}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="benchreport: render CodSpeed benchmark runs as Markdown comparison tables"
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # report
    parser_report = subparsers.add_parser("report", help="Generate benchmark report")
    parser_report.add_argument("--owner", default=None, help="Repository owner")
    parser_report.add_argument("--name", default=None, help="Repository name")
    parser_report.add_argument("--run-id", default=None, help="Run id (default: latest finished run)")
    parser_report.add_argument("--input", type=Path, default=None,
                               help="Read results from a saved JSON file instead of the API")
    parser_report.add_argument("--output", type=Path, default=None, help="Output report file")
    parser_report.add_argument("--title", default=None, help="Report title")
    parser_report.add_argument("--save-results", type=Path, default=None,
                               help="Also save aggregated results (CSV + JSONL) to this directory")
    parser_report.set_defaults(func=cmd_report)

    # latest
    parser_latest = subparsers.add_parser("latest", help="Show the latest finished run")
    parser_latest.add_argument("--owner", default=None, help="Repository owner")
    parser_latest.add_argument("--name", default=None, help="Repository name")
    parser_latest.set_defaults(func=cmd_latest)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        config = load_config(args)
        return args.func(args, config)
    except SessionExpiredError as e:
        logger.error(str(e))
        return EXIT_SESSION_EXPIRED
    except RunNotFoundError as e:
        logger.error(str(e))
        return EXIT_NOT_FOUND
    except APIError as e:
        logger.error(str(e))
        return EXIT_API_ERROR
    except ResultsFileError as e:
        logger.error(str(e))
        return EXIT_BAD_INPUT
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_BAD_CONFIG


if __name__ == "__main__":
    sys.exit(main())
