"""Command execution for the system tools the inventory relies on."""

import subprocess
from dataclasses import dataclass

SYSTEM_PROFILER = "/usr/sbin/system_profiler"

# system_profiler echoes app-supplied strings, which are not always valid UTF-8
OUTPUT_ENCODING = "utf-8"


@dataclass
class ShellResult:
    """Exit code and decoded output of one command."""

    code: int
    out: str
    err: str

    @property
    def success(self) -> bool:
        return self.code == 0

    @property
    def lines(self) -> list[str]:
        """Standard output split into lines (empty list when there was none)."""
        return self.out.split("\n") if self.out else []

    def __bool__(self) -> bool:
        return self.success


def decode_output(raw: bytes | None) -> str:
    """
    Decode captured command output.

    Undecodable bytes become U+FFFD instead of failing, line endings are
    normalized to \\n and surrounding whitespace is trimmed.

    Args:
        raw: Bytes captured from stdout or stderr

    Returns:
        Decoded text, empty when there was no output
    """
    if not raw:
        return ""
    text = raw.decode(OUTPUT_ENCODING, errors="replace")
    return text.replace("\r\n", "\n").replace("\r", "\n").strip()


def run(cmd: list[str], timeout: int = 6) -> ShellResult:
    """
    Run a command without a shell and capture its output.

    Args:
        cmd: Command and arguments, e.g. [SYSTEM_PROFILER, "-xml", "SPApplicationsDataType"]
        timeout: Maximum execution time in seconds (default: 6)

    Returns:
        ShellResult; a non-zero exit code is reported, not raised

    Raises:
        TimeoutError: If the command runs longer than `timeout`
        FileNotFoundError: If the executable does not exist
    """
    try:
        completed = subprocess.run(
            cmd,
            capture_output=True,
            timeout=timeout,
            shell=False,
            check=False
        )
    except subprocess.TimeoutExpired as e:
        raise TimeoutError(
            f"Command timed out after {timeout}s: {' '.join(cmd)}"
        ) from e

    return ShellResult(
        code=completed.returncode,
        out=decode_output(completed.stdout),
        err=decode_output(completed.stderr)
    )
