import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path(__file__).parent.parent / "config" / "xn_settings.yaml"


@dataclass(slots=True, frozen=True)
class Settings:
    """Runner settings loaded from xn_settings.yaml."""

    default_count: int = 1
    posix_shell: str = "/bin/sh"
    windows_shell: str = "cmd.exe"
    timeout_seconds: Optional[float] = None
    max_output_bytes: int = 10 * 1024 * 1024
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s [%(levelname)s] %(message)s"


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """
    Load runner settings from YAML file.

    Args:
        config_path: Settings file to read. Defaults to the packaged xn_settings.yaml.

    Returns:
        Settings: Values from the file, with defaults for anything missing.

    Raises:
        ValueError: If the file does not contain a mapping.
    """
    config_path = Path(config_path) if config_path else SETTINGS_PATH
    if not config_path.exists():
        # Fallback to defaults if file not found
        return Settings()

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return Settings()
    if not isinstance(raw, dict):
        raise ValueError(f"Settings file must contain a mapping, got: {type(raw).__name__}")

    return Settings(**_known_keys(raw))


def _known_keys(raw: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        logger.debug("Ignoring unknown settings: %s", ", ".join(unknown))
    return {key: value for key, value in raw.items() if key in known}
