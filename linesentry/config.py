"""
Configuration system for linesentry.

Supports YAML and JSON configuration files for customizing
scanning behavior, rules, suppression windows, and output.
"""

import copy
import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from linesentry.core.corpus import ConfigError
from linesentry.core.engine import DEFAULT_IGNORE_PATTERNS, DEFAULT_INLINE_MARKER
from linesentry.core.suppression import DEFAULT_NEARBY_WINDOW, DEFAULT_NEGATIVE_WINDOW, WindowPolicy

logger = logging.getLogger(__name__)


# Default configuration file names to search for
CONFIG_FILE_NAMES = [
    ".linesentry.yaml",
    ".linesentry.yml",
    ".linesentry.json",
    "linesentry.yaml",
    "linesentry.yml",
    "linesentry.json",
]


@dataclass
class RuleSetConfig:
    """Configuration for the rule corpus."""
    disabled: List[str] = field(default_factory=list)
    disabled_categories: List[str] = field(default_factory=list)
    severity_overrides: Dict[str, str] = field(default_factory=dict)
    extra_rule_files: List[str] = field(default_factory=list)


@dataclass
class WindowConfig:
    """Line radii for negative-pattern and nearby suppression checks."""
    negative: int = DEFAULT_NEGATIVE_WINDOW
    nearby: int = DEFAULT_NEARBY_WINDOW
    categories: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def to_policy(self) -> WindowPolicy:
        return WindowPolicy.from_dict(asdict(self))


@dataclass
class OutputConfig:
    """Configuration for output formatting."""
    format: str = "text"  # text, json, sarif
    output_file: Optional[str] = None
    verbose: bool = False
    show_suggestions: bool = True
    color: bool = True


@dataclass
class ScanConfig:
    """
    Main configuration for linesentry.

    Example YAML config:

    ```yaml
    scan:
      target: ./src
      exclude:
        - "node_modules/**"
        - "dist/**"
      max_file_size: 10485760
      max_workers: 4
      languages: [javascript, typescript, kotlin]

    rules:
      disabled:
        - BIZ006
        - "DEP00*"
      disabled_categories:
        - business-logic-payment
      severity_overrides:
        CORS002: error
      extra_rule_files:
        - team-rules.yaml

    windows:
      negative: 0
      nearby: 1
      categories:
        frontend-security:
          nearby: 3

    severity_threshold: warning
    inline_marker: linesentry-ignore

    output:
      format: text
      color: true
    ```
    """
    # Scan settings
    target: str = "."
    exclude_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))
    include_patterns: Optional[List[str]] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    max_workers: int = 4
    languages: Optional[List[str]] = None

    # Rule settings
    rules: RuleSetConfig = field(default_factory=RuleSetConfig)
    windows: WindowConfig = field(default_factory=WindowConfig)
    severity_threshold: str = "info"  # info, warning, error

    # Suppression
    inline_marker: str = DEFAULT_INLINE_MARKER
    use_ignore_file: bool = True

    # Output settings
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a dictionary."""
        return asdict(self)

    def to_engine_config(self) -> Dict[str, Any]:
        """Convert to engine configuration format."""
        return {
            "max_file_size": self.max_file_size,
            "max_workers": self.max_workers,
            "ignore_patterns": self.exclude_patterns,
            "include_patterns": self.include_patterns,
            "languages": self.languages,
            "severity_threshold": self.severity_threshold,
            "inline_marker": self.inline_marker,
            "use_ignore_file": self.use_ignore_file,
            "rules": asdict(self.rules),
            "windows": asdict(self.windows),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanConfig":
        """Create config from a dictionary."""
        data = copy.deepcopy(data)

        # Handle nested configs
        try:
            if isinstance(data.get("rules"), dict):
                data["rules"] = RuleSetConfig(**data["rules"])
            if isinstance(data.get("windows"), dict):
                data["windows"] = WindowConfig(**data["windows"])
            if isinstance(data.get("output"), dict):
                data["output"] = OutputConfig(**data["output"])
        except TypeError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        # Map some common alternative names
        if "exclude" in data:
            data["exclude_patterns"] = data.pop("exclude")
        if "include" in data:
            data["include_patterns"] = data.pop("include")

        # Filter to only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        unknown = sorted(k for k in data if k not in known_fields)
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))
        filtered_data = {k: v for k, v in data.items() if k in known_fields}

        return cls(**filtered_data)


def load_config(path: str) -> Dict[str, Any]:
    """
    Load configuration from a file.

    Supports YAML and JSON formats.

    Raises:
        ConfigError: if the file is missing or cannot be parsed.
    """
    path = Path(path)

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    content = path.read_text(encoding="utf-8")

    try:
        if path.suffix == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse configuration file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    return data


def find_config(start_path: str = ".") -> Optional[str]:
    """
    Find a configuration file by searching up the directory tree.

    Returns the path to the first config file found, or None.
    """
    current = Path(start_path).resolve()
    if current.is_file():
        current = current.parent

    while True:
        for name in CONFIG_FILE_NAMES:
            config_path = current / name
            if config_path.exists():
                return str(config_path)
        if current == current.parent:
            return None
        current = current.parent


def load_scan_config(path: Optional[str] = None, start_dir: str = ".") -> ScanConfig:
    """
    Load a ScanConfig from a file or create a default one.

    If path is None, searches for a config file starting from start_dir.
    Relative ``extra_rule_files`` resolve against the config file's directory.
    """
    if path is None:
        path = find_config(start_dir)

    if path is None:
        return ScanConfig()

    logger.debug("Loading configuration from %s", path)
    data = load_config(path)

    # Handle nested 'scan' section
    if "scan" in data:
        scan_data = data.pop("scan") or {}
        data.update(scan_data)

    config = ScanConfig.from_dict(data)

    base = Path(path).resolve().parent
    config.rules.extra_rule_files = [
        str(rule_file if Path(rule_file).is_absolute() else base / rule_file)
        for rule_file in config.rules.extra_rule_files
    ]
    return config


def create_default_config() -> str:
    """
    Create a default configuration file content.
    """
    config = {
        "scan": {
            "target": ".",
            "exclude": [
                "node_modules/**",
                ".git/**",
                "vendor/**",
                "dist/**",
                "build/**",
            ],
            "max_file_size": 10485760,
            "max_workers": 4,
        },
        "rules": {
            "disabled": [],
            "disabled_categories": [],
            "severity_overrides": {},
            "extra_rule_files": [],
        },
        "windows": {
            "negative": DEFAULT_NEGATIVE_WINDOW,
            "nearby": DEFAULT_NEARBY_WINDOW,
            "categories": {},
        },
        "severity_threshold": "info",
        "inline_marker": DEFAULT_INLINE_MARKER,
        "output": {
            "format": "text",
            "color": True,
            "show_suggestions": True,
        },
    }

    return yaml.dump(config, default_flow_style=False, sort_keys=False)
