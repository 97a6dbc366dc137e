"""Normalization of system_profiler application entries into AppRecords."""

import logging
from datetime import datetime, timezone
from typing import Iterable

from macos_apps.bundles import BundleInfoReader
from macos_apps.logs import TRACE
from macos_apps.models import AppRecord, UNKNOWN
from macos_apps.plist import PlistDecoder, RawDict

logger = logging.getLogger(__name__)

# obtained_from values that read better with a display name
ORIGIN_NAMES = {
    "apple": "Apple",
    "mac_app_store": "App Store",
}

IDENTIFIED_DEVELOPER = "identified_developer"
DEVELOPER_ID_PREFIX = "Developer ID Application: "

LAST_MODIFIED_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
EPOCH_SENTINEL = 0


def get_or_unknown(raw: RawDict, key: str) -> str:
    """Return raw[key], or the unknown placeholder when the key is absent."""
    value = raw.get(key)
    return UNKNOWN if value is None else value


def parse_epoch(value: str | None) -> int:
    """
    Convert a system_profiler timestamp into seconds since the epoch.

    Args:
        value: Timestamp such as "2024-09-30T16:00:00Z", or None

    Returns:
        Seconds since the epoch (UTC), or 0 if the value is absent or malformed
    """
    if not value:
        return EPOCH_SENTINEL
    try:
        parsed = datetime.strptime(value, LAST_MODIFIED_FORMAT)
    except ValueError:
        return EPOCH_SENTINEL
    return int(parsed.replace(tzinfo=timezone.utc).timestamp())


def resolve_vendor(obtained_from: str, signed_by: str) -> str:
    """
    Pick the best vendor name from the origin and signing authority.

    Args:
        obtained_from: Raw obtained_from value (before display remapping)
        signed_by: First signing authority, or the unknown placeholder

    Returns:
        Vendor name
    """
    if obtained_from == IDENTIFIED_DEVELOPER:
        if signed_by.startswith(DEVELOPER_ID_PREFIX):
            return signed_by[len(DEVELOPER_ID_PREFIX):]
        return signed_by

    origin = ORIGIN_NAMES.get(obtained_from, obtained_from)
    if origin == UNKNOWN and signed_by != UNKNOWN:
        return signed_by
    return origin


class MetadataNormalizer:
    """
    Builds AppRecords from decoded system_profiler dictionaries.

    Args:
        decoder: Decoder used for bundle Info.plist files
        bundle_reader: Source of Info.plist contents; None disables the
            bundle fallback entirely
    """

    def __init__(self, decoder: PlistDecoder, bundle_reader: BundleInfoReader | None = None):
        self.decoder = decoder
        self.bundle_reader = bundle_reader

    def normalize(self, raw: RawDict) -> AppRecord:
        """
        Normalize a single application entry.

        Raises:
            Exception: Any failure reading or decoding the bundle Info.plist
        """
        vendor = resolve_vendor(
            get_or_unknown(raw, "obtained_from"),
            get_or_unknown(raw, "signed_by")
        )
        version = raw.get("version")

        additional_info = {
            "Kind": get_or_unknown(raw, "arch_kind"),
            "Location": get_or_unknown(raw, "path"),
        }
        location = additional_info["Location"]
        if location != UNKNOWN and self.bundle_reader is not None:
            bundle_data = self.bundle_reader.read(location)
            if bundle_data is not None:
                bundle = self.decoder.lookup(bundle_data, "CFBundleGetInfoString", "CFBundleVersion")
                if bundle["CFBundleGetInfoString"]:
                    additional_info["Get Info String"] = bundle["CFBundleGetInfoString"]
                if not version:
                    version = bundle["CFBundleVersion"]

        return AppRecord(
            name=get_or_unknown(raw, "_name"),
            version=UNKNOWN if version is None else version,
            vendor=vendor,
            last_modified_epoch=parse_epoch(raw.get("lastModified")),
            additional_info=additional_info
        )

    def normalize_all(self, raws: Iterable[RawDict]) -> list[AppRecord]:
        """
        Normalize every entry, skipping the ones that fail.

        Args:
            raws: Decoded dictionaries in discovery order

        Returns:
            Records for the entries that normalized successfully, same order
        """
        records: list[AppRecord] = []
        for raw in raws:
            try:
                records.append(self.normalize(raw))
            except Exception as e:
                logger.log(TRACE, "Unable to parse dict values: %s - %s", e, raw, exc_info=True)
        return records
