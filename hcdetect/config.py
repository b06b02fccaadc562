"""Configuration management using TOML."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from hcdetect.excludes import compile_patterns

DEFAULT_CONFIG_DIR = Path(os.environ.get(
    "XDG_CONFIG_HOME", os.path.expanduser("~/.config")
)) / "hcdetect"

DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"

MIN_SCAN_INTERVAL = 10

DEFAULT_EXCLUDE_PATTERNS = [
    "**/node_modules/**",
    "**/.git/**",
    "**/.svn/**",
    "**/.hg/**",
    "**/CVS/**",
    "**/.DS_Store/**",
    "**/.venv/**",
    "**/venv/**",
    "**/env/**",
    "**/__pycache__/**",
    "**/*.lock",
    "**/dist/**",
    "**/out/**",
    "**/*.{woff,woff2,ttf,otf,eot}",
    "**/*.{png,jpg,jpeg,gif,svg,ico,webp}",
    "**/*.{mp4,mov,avi,webm,mkv,mp3,wav,ogg,flac}",
    "**/*.{doc,docx,xls,xlsx,ppt,pptx,odt,ods,odp,pdf,rtf}",
    "**/*.{zip,rar,7z,tar,gz,bz2,iso,dmg}",
    "**/*.{exe,dll,so,dylib,app,pyc}",
    "**/*.{db,sqlite,mdb}",
    "**/chromedriver",
]

DEFAULT_CONFIG = """\
# Hidden Character Detector configuration

[scanner]
# Rescan a file as soon as it changes on disk (used by `hcdetect watch`)
scan_on_save = true

# Files larger than this many bytes are skipped during workspace scans
max_file_size = 1048576

# Glob patterns, relative to the workspace root, that are never scanned.
# Supports **, *, ? and {a,b}. Leave commented out to use the built-in list.
# exclude_patterns = ["**/node_modules/**", "**/.git/**"]

[workspace_scan]
# Periodically rescan every file in the workspace
enabled = false

# Seconds between full scans (minimum 10)
interval_seconds = 60

[monitor]
# Seconds between checks for modified files
poll_interval = 1.0

[notifications]
# "terminal" = print to stderr, "desktop" = use notify-send, "both" = both
mode = "terminal"
"""

_NOTIFICATION_MODES = ("terminal", "desktop", "both")


class ConfigError(ValueError):
    """Raised when the configuration file holds an unusable value."""


def _bool(section: str, key: str, value) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{section}.{key} must be true or false")
    return value


def _number(section: str, key: str, value, kind=float):
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{section}.{key} must be a number")
    return kind(value)


@dataclass
class ScannerConfig:
    scan_on_save: bool = True
    max_file_size: int = 1_048_576
    exclude_patterns: list[str] = field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS)
    )


@dataclass
class WorkspaceScanConfig:
    enabled: bool = False
    interval_seconds: float = 60


@dataclass
class MonitorConfig:
    poll_interval: float = 1.0


@dataclass
class NotificationConfig:
    mode: str = "terminal"  # terminal, desktop, both


@dataclass
class DetectorConfig:
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    workspace_scan: WorkspaceScanConfig = field(default_factory=WorkspaceScanConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)


def load_config(path: Path | None = None) -> DetectorConfig:
    """Load configuration from a TOML file, falling back to defaults."""
    config = DetectorConfig()
    config_path = path or DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return config

    try:
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{config_path}: {e}") from e

    # Scanner settings
    scanner_raw = raw.get("scanner", {})
    if "scan_on_save" in scanner_raw:
        config.scanner.scan_on_save = _bool("scanner", "scan_on_save", scanner_raw["scan_on_save"])
    if "max_file_size" in scanner_raw:
        size = _number("scanner", "max_file_size", scanner_raw["max_file_size"], int)
        if size <= 0:
            raise ConfigError("scanner.max_file_size must be positive")
        config.scanner.max_file_size = size
    if "exclude_patterns" in scanner_raw:
        patterns = scanner_raw["exclude_patterns"]
        if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
            raise ConfigError("scanner.exclude_patterns must be a list of strings")
        try:
            compile_patterns(patterns)
        except ValueError as e:
            raise ConfigError(f"scanner.exclude_patterns: {e}") from e
        config.scanner.exclude_patterns = list(patterns)

    # Periodic workspace scan
    workspace_raw = raw.get("workspace_scan", {})
    if "enabled" in workspace_raw:
        config.workspace_scan.enabled = _bool("workspace_scan", "enabled", workspace_raw["enabled"])
    if "interval_seconds" in workspace_raw:
        interval = _number("workspace_scan", "interval_seconds", workspace_raw["interval_seconds"])
        config.workspace_scan.interval_seconds = max(interval, MIN_SCAN_INTERVAL)

    # Monitor settings
    monitor_raw = raw.get("monitor", {})
    if "poll_interval" in monitor_raw:
        poll = _number("monitor", "poll_interval", monitor_raw["poll_interval"])
        if poll <= 0:
            raise ConfigError("monitor.poll_interval must be positive")
        config.monitor.poll_interval = poll

    # Notification settings
    notif_raw = raw.get("notifications", {})
    if "mode" in notif_raw:
        mode = str(notif_raw["mode"])
        if mode not in _NOTIFICATION_MODES:
            raise ConfigError(
                f"notifications.mode must be one of {', '.join(_NOTIFICATION_MODES)}"
            )
        config.notifications.mode = mode

    return config


def init_config(path: Path | None = None) -> Path:
    """Create a default config file if one doesn't exist. Returns the path."""
    config_path = path or DEFAULT_CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)
    if not config_path.exists():
        config_path.write_text(DEFAULT_CONFIG)
    return config_path
