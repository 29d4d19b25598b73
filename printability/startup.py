"""
Startup checks and validation.

Run before starting the server to catch configuration issues early.
"""

import errno
import logging
import socket
import sys
from dataclasses import dataclass
from typing import Optional

from printability.config import ConfigError, get_reader_config, get_server_config, get_validation_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartupIssue:
    message: str
    fatal: bool = False

    def __str__(self) -> str:
        return self.message


_BIND_ERRORS = {
    errno.EADDRINUSE: "Port {port} is already in use. Another service may be running on this port.",
    errno.EADDRNOTAVAIL: "Cannot bind to {host}:{port}. Check if the host address is valid.",
    errno.EACCES: "Permission denied for port {port}. Ports below 1024 require admin/root privileges.",
}


def check_port_available(host: str, port: int) -> tuple[bool, Optional[str]]:
    """
    Check if a port is available for binding.

    Returns:
        (True, None) if available
        (False, error_message) if not
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError as e:
            template = _BIND_ERRORS.get(e.errno, "Cannot bind to {host}:{port}: {error}")
            return False, template.format(host=host, port=port, error=e)
    return True, None


def validate_config(config: dict) -> list[StartupIssue]:
    """
    Validate configuration.

    Returns:
        Issues found, fatal ones first within each section (empty if all good)
    """
    issues = []

    port = get_server_config(config)["port"]
    if not isinstance(port, int) or not 1 <= port <= 65535:
        issues.append(StartupIssue(f"Invalid port: {port}. Must be between 1 and 65535.", fatal=True))
    elif port < 1024:
        issues.append(StartupIssue(f"Port {port} is a privileged port. Consider using a port >= 1024."))

    try:
        settings = get_validation_settings(config)
    except ConfigError as e:
        issues.append(StartupIssue(f"Invalid validation settings: {e}", fatal=True))
    else:
        if not settings.check_fonts:
            issues.append(StartupIssue("Font check is disabled. Documents with missing fonts will be accepted."))
        if not settings.check_left_margin:
            issues.append(StartupIssue("Margin check is disabled. Text in the barcode area will not be detected."))

    try:
        get_reader_config(config)
    except ConfigError as e:
        issues.append(StartupIssue(f"Invalid reader settings: {e}", fatal=True))

    return issues


def check_dependencies() -> dict[str, bool]:
    """
    Check which optional dependencies are available.

    Returns:
        Dict of dependency name -> is_available
    """
    deps = {}

    # pypdf needs cryptography to open AES-encrypted documents
    try:
        import cryptography  # noqa: F401
        deps["cryptography"] = True
    except ImportError:
        deps["cryptography"] = False

    return deps


def run_startup_checks(config: dict) -> None:
    """
    Run all startup checks. Exits with error if critical issues found.

    Args:
        config: Loaded configuration dict
    """
    logger.info("Running startup checks...")

    issues = validate_config(config)

    server = get_server_config(config)
    if isinstance(server["port"], int):
        available, port_error = check_port_available(server["host"], server["port"])
        if not available:
            issues.append(StartupIssue(port_error, fatal=True))

    missing_deps = [name for name, available in check_dependencies().items() if not available]
    if missing_deps:
        issues.append(StartupIssue(f"Optional dependencies not installed: {', '.join(missing_deps)}"))

    warnings = [issue for issue in issues if not issue.fatal]
    errors = [issue for issue in issues if issue.fatal]

    for warning in warnings:
        logger.warning(f"  ⚠ {warning}")

    if errors:
        logger.error("Startup checks failed:")
        for error in errors:
            logger.error(f"  ✗ {error}")
        logger.error("Fix these issues and try again.")
        sys.exit(1)

    if warnings:
        logger.info(f"Startup checks passed with {len(warnings)} warning(s)")
    else:
        logger.info("Startup checks passed ✓")


def _on_off(enabled: bool) -> str:
    return "on" if enabled else "off"


def print_startup_banner(config: dict) -> None:
    """Print the checks in effect and the endpoints."""
    port = get_server_config(config)["port"]
    settings = get_validation_settings(config)
    strategy, _ = get_reader_config(config)

    lines = [
        "=" * 50,
        "  Printability Validator",
        "=" * 50,
        "",
        f"  URL:       http://localhost:{port}",
        f"  API Docs:  http://localhost:{port}/docs",
        "",
        "  Checks:",
        f"    • Left margin:  {_on_off(settings.check_left_margin)}",
        f"    • Fonts:        {_on_off(settings.check_fonts)}",
        f"    • Page count:   {_on_off(settings.check_page_count)} (max {settings.max_page_count})",
        f"    • PDF version:  {_on_off(settings.check_pdf_version)}",
        f"    • Bleed:        +{settings.bleed.positive_mm} / -{settings.bleed.negative_mm} mm",
        f"    • Reading:      {strategy.value}",
        "",
        "  Endpoints:",
        "    POST /v1/validate   - Validate a PDF",
        "    GET  /v1/settings   - Default settings",
        "    GET  /v1/health     - Health check",
        "=" * 50,
    ]
    print("\n" + "\n".join(lines) + "\n")
