"""
Printability Validator entry point.

    python -m printability.main check letter.pdf invoice.pdf
    python -m printability.main serve --port 5001
"""

import argparse
import dataclasses
import json
import logging
import sys

import uvicorn

from printability.api.server import create_app
from printability.config import (
    ConfigError,
    get_reader_config,
    get_server_config,
    get_validation_settings,
    load_config,
)
from printability.startup import print_startup_banner, run_startup_checks
from printability.validation import Bleed, PdfValidator, ReadStrategy

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_PRINTABLE = 1
EXIT_IO_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Printability Validator")
    parser.add_argument(
        "-c", "--config",
        help="Path to config file (default: config/default.yaml)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Validate PDF files")
    check.add_argument("files", nargs="+", help="PDF files to validate")
    check.add_argument(
        "--max-pages",
        type=int,
        help="Override maximum page count"
    )
    check.add_argument(
        "--bleed",
        type=int,
        nargs=2,
        metavar=("POSITIVE", "NEGATIVE"),
        help="Override bleed in mm"
    )
    check.add_argument("--no-margin", action="store_true", help="Skip the left margin check")
    check.add_argument("--no-fonts", action="store_true", help="Skip the font check")
    check.add_argument("--no-page-count", action="store_true", help="Skip the page count check")
    check.add_argument("--no-version", action="store_true", help="Skip the PDF version check")
    check.add_argument(
        "--incremental",
        action="store_true",
        help="Read pages one at a time instead of loading the whole document"
    )
    check.add_argument("--json", action="store_true", help="Print results as JSON")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument(
        "--host",
        help="Override host from config"
    )
    serve.add_argument(
        "--port",
        type=int,
        help="Override port from config"
    )
    serve.add_argument(
        "--skip-checks",
        action="store_true",
        help="Skip startup checks (not recommended)"
    )
    return parser


def run_check(args, config: dict) -> int:
    """Validate each file and print the outcome. Returns the exit code."""
    settings = get_validation_settings(config)
    strategy, reader_config = get_reader_config(config)

    overrides = {}
    if args.max_pages is not None:
        overrides["max_page_count"] = args.max_pages
    if args.bleed is not None:
        overrides["bleed"] = Bleed(positive_mm=args.bleed[0], negative_mm=args.bleed[1])
    if args.no_margin:
        overrides["check_left_margin"] = False
    if args.no_fonts:
        overrides["check_fonts"] = False
    if args.no_page_count:
        overrides["check_page_count"] = False
    if args.no_version:
        overrides["check_pdf_version"] = False
    settings = dataclasses.replace(settings, **overrides)

    if args.incremental:
        strategy = ReadStrategy.INCREMENTAL

    validator = PdfValidator(reader_config)
    exit_code = EXIT_OK
    report = {}

    for path in args.files:
        try:
            result = validator.validate_file(path, settings, strategy)
        except OSError as e:
            logger.error(f"Cannot read {path}: {e}")
            return EXIT_IO_ERROR

        if not result.ok_for_print:
            exit_code = EXIT_NOT_PRINTABLE

        if args.json:
            report[path] = result.to_dict()
        else:
            status = "OK" if result.ok_for_print else "FAILED"
            print(f"{path}: {status} ({result.pages} pages)")
            for message in result.messages():
                print(f"  - {message}")

    if args.json:
        print(json.dumps(report, indent=2, ensure_ascii=False))

    return exit_code


def run_server(args, config: dict) -> None:
    # Apply CLI overrides before validation
    if args.host:
        config.setdefault("server", {})["host"] = args.host
    if args.port:
        config.setdefault("server", {})["port"] = args.port
    if args.debug:
        config.setdefault("server", {})["debug"] = True

    # Run startup checks
    if not args.skip_checks:
        run_startup_checks(config)

    settings = get_validation_settings(config)
    strategy, reader_config = get_reader_config(config)
    server_config = get_server_config(config)

    app = create_app(
        validator=PdfValidator(reader_config),
        settings=settings,
        strategy=strategy,
        cors_origins=server_config.get("cors_origins"),
        debug=server_config.get("debug", False)
    )

    print_startup_banner(config)

    uvicorn.run(
        app,
        host=server_config["host"],
        port=server_config["port"],
        log_level="debug" if server_config.get("debug") else "info"
    )


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        logger.error(f"Failed to load config: {e}")
        sys.exit(1)

    try:
        if args.command == "check":
            sys.exit(run_check(args, config))
        run_server(args, config)
    except (ConfigError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
