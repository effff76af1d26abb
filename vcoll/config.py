"""
Configuration management for vcoll.

Settings only affect the command line tool; the library itself is configured
through constructor arguments.

Loaded from:
- XDG config directory: $XDG_CONFIG_HOME/vcoll/config.json
  (usually ~/.config/vcoll/config.json)
- Fallback: ~/.vcoll/config.json
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class CLIConfig:
    """CLI default options."""
    verbose: bool = False
    color: bool = True
    page_size: int = 50


@dataclass
class OutputConfig:
    """How views are rendered."""
    format: str = "table"  # "table" or "json"
    json_indent: int = 2
    max_column_width: int = 40


@dataclass
class VcollConfig:
    """Main vcoll configuration."""
    cli: CLIConfig = field(default_factory=CLIConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "cli": asdict(self.cli),
            "output": asdict(self.output),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VcollConfig':
        """Create from dictionary."""
        return cls(
            cli=CLIConfig(**data.get("cli", {})),
            output=OutputConfig(**data.get("output", {})),
        )


def get_config_path() -> Path:
    """
    Get configuration file path.

    Follows the XDG Base Directory specification:
    1. $XDG_CONFIG_HOME/vcoll/config.json
    2. ~/.config/vcoll/config.json if ~/.config exists
    3. Fallback: ~/.vcoll/config.json

    Returns:
        Path to config file
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "vcoll" / "config.json"

    xdg_config_home = Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "vcoll"
    else:
        config_dir = Path.home() / ".vcoll"

    return config_dir / "config.json"


def load_config(path: Optional[Path] = None) -> VcollConfig:
    """
    Load configuration from file.

    Returns:
        VcollConfig with loaded values, or defaults if the file is missing
        or unreadable
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return VcollConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return VcollConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}; using defaults")
        return VcollConfig()


def save_config(config: VcollConfig, path: Optional[Path] = None) -> Path:
    """
    Save configuration to file.

    Returns:
        The path written
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.debug(f"Configuration saved to {config_path}")
    return config_path


def update_config(
    # CLI settings
    cli_verbose: Optional[bool] = None,
    cli_color: Optional[bool] = None,
    cli_page_size: Optional[int] = None,
    # Output settings
    output_format: Optional[str] = None,
    output_json_indent: Optional[int] = None,
    output_max_column_width: Optional[int] = None,
    path: Optional[Path] = None,
) -> VcollConfig:
    """
    Update configuration.

    Only updates provided values, leaving others unchanged.

    Raises:
        ValueError: If ``output_format`` is not "table" or "json"
    """
    config = load_config(path)

    if cli_verbose is not None:
        config.cli.verbose = cli_verbose
    if cli_color is not None:
        config.cli.color = cli_color
    if cli_page_size is not None:
        config.cli.page_size = cli_page_size

    if output_format is not None:
        if output_format not in ("table", "json"):
            raise ValueError(f"Unknown output format '{output_format}' (expected 'table' or 'json')")
        config.output.format = output_format
    if output_json_indent is not None:
        config.output.json_indent = output_json_indent
    if output_max_column_width is not None:
        config.output.max_column_width = output_max_column_width

    save_config(config, path)
    return config
