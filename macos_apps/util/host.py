"""Host system information collection."""

import platform
import re
import socket

from macos_apps.models import HostInfo
from macos_apps.util.shell import run

SW_VERS = "/usr/bin/sw_vers"


def get_host_info() -> HostInfo:
    """
    Describe the host the inventory was taken on.

    Returns:
        HostInfo with OS version, build, architecture, and hostname

    Raises:
        RuntimeError: If sw_vers is missing, fails, or prints something unexpected
    """
    os_version, build = _read_sw_vers()
    return HostInfo(
        os_version=os_version,
        build=build,
        arch=platform.machine(),
        hostname=socket.gethostname()
    )


def _read_sw_vers() -> tuple[str, str]:
    try:
        result = run([SW_VERS], timeout=5)
    except TimeoutError as e:
        raise RuntimeError(f"sw_vers timed out: {e}") from e
    except FileNotFoundError as e:
        raise RuntimeError(f"sw_vers not found at {SW_VERS}. Are you running on macOS?") from e

    if not result.success:
        raise RuntimeError(f"sw_vers failed with exit code {result.code}: {result.err}")

    # ProductVersion:     14.2.1
    # BuildVersion:       23C71
    version_match = re.search(r"ProductVersion:\s*(.+)", result.out)
    build_match = re.search(r"BuildVersion:\s*(.+)", result.out)
    if not version_match or not build_match:
        raise RuntimeError(f"Could not parse sw_vers output: {result.out}")

    return version_match.group(1).strip(), build_match.group(1).strip()
