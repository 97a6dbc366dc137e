"""Configuration file management for macos-apps."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from macos_apps.logs import resolve_level


@dataclass
class Config:
    """Configuration for the application inventory."""

    # Recover from malformed XML instead of failing the whole inventory
    lenient_xml: bool = True

    # Consult <app>/Contents/Info.plist for missing versions and Get Info strings
    read_bundle_info: bool = True

    # Seconds to wait for system_profiler
    command_timeout: int = 120

    log_level: str = "WARNING"

    # Vendors dropped from the report (exact match on the resolved vendor)
    exclude_vendors: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.command_timeout, int) or self.command_timeout <= 0:
            raise ValueError(f"command_timeout must be a positive integer, got {self.command_timeout!r}")
        resolve_level(self.log_level)


DEFAULT_CONFIG_PATHS = [
    Path.home() / ".macos-apps.yaml",
    Path.home() / ".macos-apps.yml",
    Path.home() / ".config" / "macos-apps" / "config.yaml",
    Path.home() / ".config" / "macos-apps" / "config.yml",
]


def load_config(config_path: Path | str | None = None) -> Config:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. If None, the first existing file of
            DEFAULT_CONFIG_PATHS is used.

    Returns:
        Config object with loaded settings (or defaults if no config found)

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If the file cannot be parsed or holds invalid settings
    """
    if config_path:
        config_file = Path(config_path).expanduser()
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
    else:
        config_file = next((path for path in DEFAULT_CONFIG_PATHS if path.exists()), None)
        if config_file is None:
            return Config()

    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError("top level must be a mapping")
        return Config(**data)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_file}: {e}") from e


def save_example_config(output_path: Path | str) -> None:
    """
    Save an example configuration file with all options documented.

    Args:
        output_path: Where to save the example config
    """
    example = """# macos-apps configuration file
# Place at ~/.macos-apps.yaml or ~/.config/macos-apps/config.yaml

# Keep going when system_profiler emits malformed XML
lenient_xml: true

# Read <app>/Contents/Info.plist for missing versions and Get Info strings
read_bundle_info: true

# Seconds to wait for system_profiler (large hosts can take a while)
command_timeout: 120

# TRACE, DEBUG, INFO, WARNING, ERROR
log_level: WARNING

# Hide applications from these vendors
exclude_vendors:
  - Apple
  # - App Store
"""

    path = Path(output_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(example)
