"""
tactile/core/config.py — Typed configuration loader for the Tactile Braille Tutor.

Loads config/tactile.yaml and validates all values into typed dataclasses.
All downstream modules import from this module; never read YAML directly.
Cell geometry is fixed and lives in :mod:`core.constants`, not here.
"""

from __future__ import annotations

import codecs
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

_ENV_VAR = "TACTILE_CONFIG"


# ──────────────────────────────────────────────
# Dataclass hierarchy — mirrors tactile.yaml
# ──────────────────────────────────────────────


@dataclass(frozen=True)
class HapticsConfig:
    """Haptic confirmation output."""

    enabled: bool = True
    backend: str = "bell"
    pulse_ms: int = 40


@dataclass(frozen=True)
class SpeechConfig:
    """Spoken announcement of the active cell."""

    announce_cells: bool = False
    rate: int = 160
    volume: float = 1.0
    voice_id: Optional[str] = None


@dataclass(frozen=True)
class ImportConfig:
    """Plain-text file import."""

    encoding: str = "utf-8"
    max_chars: int = 20_000


@dataclass(frozen=True)
class UIConfig:
    """Tkinter window configuration."""

    font_family: str = "Arial"
    label_font_size: int = 20
    braille_font_size: int = 28
    theme: str = "light"


@dataclass(frozen=True)
class LoggingConfig:
    """Logging and session journal configuration."""

    level: str = "INFO"
    log_dir: str = "logs"
    log_sessions: bool = True

    @property
    def resolved_log_dir(self) -> Path:
        """Return the journal directory as a Path, expanding ~ if needed."""
        return Path(os.path.expanduser(self.log_dir))


@dataclass(frozen=True)
class TactileConfig:
    """Root configuration object — single source of truth for all settings."""

    haptics: HapticsConfig = field(default_factory=HapticsConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    importer: ImportConfig = field(default_factory=ImportConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# ──────────────────────────────────────────────
# Loader
# ──────────────────────────────────────────────


def load_config(config_path: Path | str | None = None) -> TactileConfig:
    """
    Load, validate, and return a TactileConfig from a YAML file.

    The search order for the config file is:
    1. *config_path* argument (if provided)
    2. ``TACTILE_CONFIG`` environment variable
    3. ``config/tactile.yaml`` relative to the project root
    4. Built-in defaults (no file required)

    Args:
        config_path: Optional path to a ``tactile.yaml`` file.

    Returns:
        A fully populated and frozen :class:`TactileConfig` instance.

    Raises:
        ValueError: If a YAML field is unknown or has an invalid value.
        FileNotFoundError: If *config_path* (or the env var) names a missing file.
    """
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = Path(config_path)
        if not resolved_path.exists():
            raise FileNotFoundError(f"Config file not found: {resolved_path}")
    elif _ENV_VAR in os.environ:
        resolved_path = Path(os.environ[_ENV_VAR])
        if not resolved_path.exists():
            raise FileNotFoundError(
                f"{_ENV_VAR} points to missing file: {resolved_path}"
            )
    else:
        # Auto-discover: walk up from this file to find config/tactile.yaml
        here = Path(__file__).resolve()
        for parent in [here.parent.parent.parent, here.parent.parent]:
            candidate = parent / "config" / "tactile.yaml"
            if candidate.exists():
                resolved_path = candidate
                break

    raw: dict = {}
    if resolved_path is not None:
        logger.info("Loading config from: %s", resolved_path)
        with resolved_path.open("r", encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file must be a YAML mapping, got: {type(loaded)}")
        raw = loaded
    else:
        logger.info("No config file found — using built-in defaults")

    try:
        haptics_cfg = HapticsConfig(**_section(raw, "haptics"))
        speech_cfg = SpeechConfig(**_section(raw, "speech"))
        import_cfg = ImportConfig(**_section(raw, "import"))
        ui_cfg = UIConfig(**_section(raw, "ui"))
        log_cfg = LoggingConfig(**_section(raw, "logging"))
    except TypeError as exc:
        raise ValueError(f"Invalid config value: {exc}") from exc

    _validate_config(haptics_cfg, speech_cfg, import_cfg, ui_cfg, log_cfg)

    config = TactileConfig(
        haptics=haptics_cfg,
        speech=speech_cfg,
        importer=import_cfg,
        ui=ui_cfg,
        logging=log_cfg,
    )
    logger.debug("Config loaded: %s", config)
    return config


def _section(raw: dict, name: str) -> dict:
    """Return the mapping under *name*, or {} when absent or null."""
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got: {type(value)}")
    return value


def _validate_config(
    haptics: HapticsConfig,
    speech: SpeechConfig,
    importer: ImportConfig,
    ui: UIConfig,
    logging_cfg: LoggingConfig,
) -> None:
    """
    Validate cross-field constraints on the loaded configuration.

    Raises:
        ValueError: If any configured value has the wrong type or violates a
            hard constraint.
    """
    _require_type("haptics.backend", haptics.backend, str)
    _require_type("haptics.pulse_ms", haptics.pulse_ms, int)
    _require_type("speech.rate", speech.rate, int)
    _require_type("speech.volume", speech.volume, (int, float))
    _require_type("import.max_chars", importer.max_chars, int)
    _require_type("import.encoding", importer.encoding, str)
    _require_type("ui.theme", ui.theme, str)
    _require_type("ui.label_font_size", ui.label_font_size, int)
    _require_type("ui.braille_font_size", ui.braille_font_size, int)
    _require_type("logging.level", logging_cfg.level, str)
    _require_type("logging.log_dir", logging_cfg.log_dir, str)

    if haptics.backend not in {"bell", "log"}:
        raise ValueError(
            f"haptics.backend must be 'bell' or 'log', got '{haptics.backend}'"
        )
    if haptics.pulse_ms <= 0:
        raise ValueError(f"haptics.pulse_ms must be positive, got {haptics.pulse_ms}")
    if not (0.0 <= speech.volume <= 1.0):
        raise ValueError(f"speech.volume must be in [0, 1], got {speech.volume}")
    if speech.rate <= 0:
        raise ValueError(f"speech.rate must be positive, got {speech.rate}")
    if importer.max_chars <= 0:
        raise ValueError(f"import.max_chars must be positive, got {importer.max_chars}")
    try:
        codecs.lookup(importer.encoding)
    except LookupError as exc:
        raise ValueError(f"import.encoding is not a known codec: '{importer.encoding}'") from exc
    if ui.theme not in {"light", "dark"}:
        raise ValueError(f"ui.theme must be 'light' or 'dark', got '{ui.theme}'")
    if logging_cfg.level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
        raise ValueError(
            f"logging.level must be DEBUG, INFO, WARNING or ERROR, got '{logging_cfg.level}'"
        )


def _require_type(name: str, value: object, expected: type | tuple[type, ...]) -> None:
    """Raise ValueError unless *value* is an instance of *expected* (bools rejected)."""
    if isinstance(value, bool) or not isinstance(value, expected):
        raise ValueError(f"{name} has the wrong type: {value!r}")
