"""Command-line interface for the macOS application inventory."""

import sys
import platform
from pathlib import Path
from typing import Optional

import typer

from macos_apps import __version__
from macos_apps.config import Config, load_config, save_example_config
from macos_apps.engine import build_report
from macos_apps.logs import setup_logging
from macos_apps.output.render import render_human, render_json


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        print(f"macos-apps version {__version__}")
        raise typer.Exit()


def inventory(
    json: bool = typer.Option(
        False,
        "--json",
        help="Output results in JSON format"
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        help="Write output to file instead of stdout"
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to configuration file (default: ~/.macos-apps.yaml)"
    ),
    no_bundle_info: bool = typer.Option(
        False,
        "--no-bundle-info",
        help="Don't read <app>/Contents/Info.plist for missing versions"
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail on malformed system_profiler XML instead of recovering"
    ),
    exclude_vendor: Optional[list[str]] = typer.Option(
        None,
        "--exclude-vendor",
        help="Hide applications from a vendor (e.g., 'Apple'). Can be specified multiple times."
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR)"
    ),
    generate_config: Optional[Path] = typer.Option(
        None,
        "--generate-config",
        help="Generate example configuration file at specified path and exit"
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """
    List the applications installed on this Mac.

    Reads `system_profiler -xml SPApplicationsDataType`, resolves vendors from
    the install origin and code signature, and falls back to each bundle's
    Info.plist for missing versions.

    Examples:
        macos-apps                                 # Table of installed apps
        macos-apps --json --out apps.json          # Save JSON inventory
        macos-apps --exclude-vendor Apple          # Hide Apple's own apps
        macos-apps --log-level TRACE               # Show skipped entries
        macos-apps --generate-config ~/.macos-apps.yaml
    """
    if generate_config:
        try:
            save_example_config(generate_config)
            print(f"✓ Example configuration saved to {generate_config}", file=sys.stderr)
            sys.exit(0)
        except Exception as e:
            print(f"Error generating config: {e}", file=sys.stderr)
            sys.exit(2)

    if platform.system() != "Darwin":
        print("Error: This tool only works on macOS", file=sys.stderr)
        sys.exit(2)

    try:
        config = load_config(config_file)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        print("Continuing with default settings...", file=sys.stderr)
        config = Config()

    # CLI overrides config
    if no_bundle_info:
        config.read_bundle_info = False
    if strict:
        config.lenient_xml = False
    if exclude_vendor:
        config.exclude_vendors.extend(exclude_vendor)
    if log_level:
        config.log_level = log_level

    try:
        setup_logging(config.log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        report = build_report(config)
    except Exception as e:
        print(f"Inventory failed: {e}", file=sys.stderr)
        sys.exit(3)

    try:
        output = render_json(report) if json else render_human(report)
    except Exception as e:
        print(f"Rendering failed: {e}", file=sys.stderr)
        sys.exit(3)

    try:
        if out:
            if not out.parent.exists():
                print(f"Error: Directory does not exist: {out.parent}", file=sys.stderr)
                sys.exit(2)
            out.write_text(output)
            print(f"✓ Inventory written to {out} ({len(report.apps)} applications)", file=sys.stderr)
        else:
            print(output)
    except OSError as e:
        print(f"Output failed: {e}", file=sys.stderr)
        sys.exit(3)

    sys.exit(0)


def main() -> None:
    """Entry point for the CLI."""
    typer.run(inventory)


if __name__ == "__main__":
    main()
