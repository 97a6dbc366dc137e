"""Main inventory engine wiring system_profiler output to normalized records."""

import logging
from typing import Callable

from macos_apps.bundles import BundleInfoReader
from macos_apps.config import Config
from macos_apps.dedupe import dedupe
from macos_apps.logs import TRACE
from macos_apps.models import AppRecord, HostInfo, InventoryReport
from macos_apps.normalizer import MetadataNormalizer
from macos_apps.plist import PlistDecoder
from macos_apps.util.host import get_host_info
from macos_apps.util.shell import SYSTEM_PROFILER, ShellResult, run

logger = logging.getLogger(__name__)

PROFILER_COMMAND = [SYSTEM_PROFILER, "-xml", "SPApplicationsDataType"]

Runner = Callable[..., ShellResult]


def collect_profiler_lines(runner: Runner = run, timeout: int = 120) -> list[str]:
    """
    Run system_profiler and return its XML output as lines.

    Args:
        runner: Command runner with the signature of util.shell.run
        timeout: Seconds to wait for the command

    Returns:
        Output lines, or an empty list if the command failed
    """
    try:
        result = runner(PROFILER_COMMAND, timeout=timeout)
    except Exception as e:
        logger.log(TRACE, "Unable to run system_profiler: %s", e, exc_info=True)
        return []

    if not result.success:
        logger.log(TRACE, "system_profiler exited with %s: %s", result.code, result.err)
        return []
    return result.lines


def parse_installed_apps(
    lines: list[str],
    decoder: PlistDecoder | None = None,
    bundle_reader: BundleInfoReader | None = None
) -> list[AppRecord]:
    """
    Turn system_profiler XML lines into unique application records.

    Args:
        lines: XML plist output, joined without separators before parsing
        decoder: Plist decoder (a lenient one is created when omitted)
        bundle_reader: Info.plist source for fallbacks; None disables them

    Returns:
        Unique records in discovery order, or an empty list if the document
        cannot be parsed
    """
    decoder = decoder or PlistDecoder(lenient=True)
    try:
        raws = decoder.parse_items("".join(lines))
    except Exception as e:
        logger.log(TRACE, "Unable to read installed apps: %s", e, exc_info=True)
        return []

    if not raws:
        return []

    normalizer = MetadataNormalizer(decoder, bundle_reader)
    return dedupe(normalizer.normalize_all(raws))


def query_installed_apps(
    config: Config | None = None,
    runner: Runner = run,
    decoder: PlistDecoder | None = None,
    bundle_reader: BundleInfoReader | None = None
) -> list[AppRecord]:
    """
    Inventory the applications installed on this Mac.

    Never raises; any failure to obtain or parse the listing yields [].

    Args:
        config: Inventory settings (defaults when omitted)
        runner: Command runner, replaceable in tests
        decoder: Plist decoder; built from config.lenient_xml when omitted
        bundle_reader: Info.plist source; built when config.read_bundle_info

    Returns:
        Unique application records in discovery order

    Example:
        >>> apps = query_installed_apps()
        >>> print(f"Found {len(apps)} applications")
    """
    config = config or Config()
    decoder = decoder or PlistDecoder(lenient=config.lenient_xml)
    if bundle_reader is None and config.read_bundle_info:
        bundle_reader = BundleInfoReader()

    lines = collect_profiler_lines(runner, timeout=config.command_timeout)
    apps = parse_installed_apps(lines, decoder, bundle_reader)
    logger.debug("Found %d installed applications", len(apps))
    return apps


def build_report(
    config: Config | None = None,
    runner: Runner = run,
    host: HostInfo | None = None
) -> InventoryReport:
    """
    Run the inventory and wrap it in a report with host details.

    Args:
        config: Inventory settings; exclude_vendors is applied here
        runner: Command runner, replaceable in tests
        host: Host details; collected via sw_vers when omitted

    Returns:
        InventoryReport with the filtered application list
    """
    config = config or Config()

    if host is None:
        try:
            host = get_host_info()
        except RuntimeError as e:
            logger.warning("Could not collect host information: %s", e)
            host = HostInfo.unknown()

    apps = query_installed_apps(config, runner=runner)
    if config.exclude_vendors:
        excluded = set(config.exclude_vendors)
        apps = [app for app in apps if app.vendor not in excluded]

    return InventoryReport.create(host=host, apps=apps)
