"""Access to per-application bundle metadata on disk."""

import plistlib
from pathlib import Path

INFO_PLIST = Path("Contents") / "Info.plist"

# Binary plists start with these magic bytes
BINARY_PLIST_MAGIC = b"bplist"


class BundleInfoReader:
    """
    Reads the companion Info.plist of an application bundle.

    Binary plists are converted to XML so every caller sees the same format.

    Example:
        >>> data = BundleInfoReader().read("/Applications/Safari.app")
        >>> data is None or data.startswith(b"<?xml")
        True
    """

    def info_plist_path(self, location: str) -> Path:
        """Path of the Info.plist inside the bundle at `location`."""
        return Path(location) / INFO_PLIST

    def read(self, location: str) -> bytes | None:
        """
        Return the bundle's Info.plist as XML bytes.

        Args:
            location: Path to the .app bundle

        Returns:
            XML plist bytes, or None if the bundle has no Info.plist

        Raises:
            OSError: If the file exists but cannot be read
            plistlib.InvalidFileException: If a binary plist is corrupt
        """
        path = self.info_plist_path(location)
        if not path.is_file():
            return None

        data = path.read_bytes()
        if data.startswith(BINARY_PLIST_MAGIC):
            data = plistlib.dumps(plistlib.loads(data), fmt=plistlib.FMT_XML)
        return data
