"""Data models for the macOS application inventory."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, ConfigDict

# Placeholder for fields missing from system_profiler output
UNKNOWN = "unknown"


class AppRecord(BaseModel):
    """One installed application, normalized from system_profiler output."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "Slack",
                "version": "4.41.105",
                "vendor": "Slack Technologies, Inc. (BQR82RBBHL)",
                "last_modified_epoch": 1727712000,
                "additional_info": {
                    "Kind": "arch_arm_i64",
                    "Location": "/Applications/Slack.app",
                    "Get Info String": "Slack 4.41.105"
                }
            }
        }
    )

    name: str = Field(default=UNKNOWN, description="Application name (_name)")
    version: str = Field(default=UNKNOWN, description="Application version, possibly empty")
    vendor: str = Field(default=UNKNOWN, description="Vendor derived from origin and signature")
    last_modified_epoch: int = Field(
        default=0,
        description="Last modification time in seconds since the epoch (0 when unknown)"
    )
    additional_info: dict[str, str] = Field(
        default_factory=dict,
        description="Extra ordered key/value details such as Kind and Location"
    )

    def __hash__(self) -> int:
        return hash((
            self.name,
            self.version,
            self.vendor,
            self.last_modified_epoch,
            frozenset(self.additional_info.items()),
        ))

    @property
    def location(self) -> str:
        """Bundle path, or the unknown placeholder."""
        return self.additional_info.get("Location", UNKNOWN)


class HostInfo(BaseModel):
    """Host system information."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "os_version": "14.2.1",
                "build": "23C71",
                "arch": "arm64",
                "hostname": "macbook-pro.local"
            }
        }
    )

    os_version: str = Field(description="macOS version (e.g., '14.2.1')")
    build: str = Field(description="macOS build number (e.g., '23C71')")
    arch: str = Field(description="System architecture (e.g., 'arm64', 'x86_64')")
    hostname: str = Field(description="System hostname")

    @classmethod
    def unknown(cls) -> "HostInfo":
        """Host info used when sw_vers is unavailable."""
        return cls(os_version=UNKNOWN, build=UNKNOWN, arch=UNKNOWN, hostname=UNKNOWN)


class InventoryReport(BaseModel):
    """Complete inventory of installed applications for one host."""

    schema_version: str = Field(
        default="0.1",
        description="Schema version for compatibility tracking"
    )
    host: HostInfo = Field(description="Information about the inventoried host")
    timestamp: str = Field(description="Inventory timestamp in ISO-8601 format")
    apps: list[AppRecord] = Field(
        default_factory=list,
        description="Installed applications in discovery order"
    )

    @classmethod
    def create(cls, host: HostInfo, apps: list[AppRecord] | None = None) -> "InventoryReport":
        """Create a new report stamped with the current UTC time."""
        return cls(
            host=host,
            timestamp=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            apps=apps or []
        )

    def vendor_summary(self) -> dict[str, int]:
        """Count applications per vendor, most common first."""
        counts: dict[str, int] = {}
        for app in self.apps:
            counts[app.vendor] = counts.get(app.vendor, 0) + 1
        return dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))
