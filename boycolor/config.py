"""Configuration of the emulator application window and input."""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from boycolor.input import KeyboardBinding

logger = logging.getLogger(__name__)

SCREEN_W = 160
"""Width of the Game Boy screen, in pixels."""
SCREEN_H = 144
"""Height of the Game Boy screen, in pixels."""

DEFAULT_SCALE = 2
"""Default size, in window pixels, of each Game Boy pixel."""

DEFAULT_TITLE = "BoyColor"


class ConfigError(Exception):
    """The configuration file cannot be used."""


@dataclass
class EmulatorAppConfig:
    """Settings of the emulator application.

    ``width`` and ``height`` are hints: when ``force_aspect`` is true the
    display keeps the Game Boy's aspect ratio.
    """

    title: str = DEFAULT_TITLE
    width: int = SCREEN_W * DEFAULT_SCALE
    height: int = SCREEN_H * DEFAULT_SCALE
    force_aspect: bool = True
    keyboard_binding: KeyboardBinding = field(
        default_factory=lambda: KeyboardBinding.QWERTY
    )
    display_fps: bool = False

    def compute_display_scale(self) -> tuple[int, int]:
        """Return the (horizontal, vertical) display scale."""
        scale_h = self.width // SCREEN_W
        scale_v = self.height // SCREEN_H
        if self.force_aspect:
            scale = min(scale_h, scale_v)
            return scale, scale
        return scale_h, scale_v

    @classmethod
    def from_file(cls, filepath: str | Path) -> "EmulatorAppConfig":
        """Return the defaults overridden by the valid settings of a TOML file.

        Invalid or missing settings are reported as warnings and keep their
        default values.
        """
        path = Path(filepath)
        config = cls()
        try:
            content = path.read_text()
        except (OSError, UnicodeDecodeError):
            raise ConfigError(f"could not load the config file : {path}") from None
        try:
            table = tomllib.loads(content)
        except tomllib.TOMLDecodeError as err:
            raise ConfigError(
                f'parsing error in config file "{path}" : {err}'
            ) from err

        logger.info('reading configuration from file "%s"...', path)
        if "display" not in table:
            logger.warning("no display section in config file")
        else:
            display = table["display"]
            if not isinstance(display, dict):
                raise ConfigError("config file error : no display section")
            config._apply_display(display)
        logger.info("configuration reading done.")
        return config

    def _apply_display(self, display: dict[str, Any]) -> None:
        try:
            self.force_aspect = _lookup_bool("force_aspect", display)
        except LookupError as err:
            logger.warning("%s", err.args[0])
        try:
            self.display_fps = _lookup_bool("show_fps", display)
        except LookupError as err:
            logger.warning("%s", err.args[0])
        try:
            width = _lookup_int("width", display)
        except LookupError as err:
            logger.warning("%s", err.args[0])
        else:
            if width > 0 and (width & 0xFFFF) >= SCREEN_W:
                self.width = width & 0xFFFF
            else:
                logger.warning("invalid display width")
        try:
            height = _lookup_int("height", display)
        except LookupError as err:
            logger.warning("%s", err.args[0])
        else:
            if height > 0 and (height & 0xFFFF) >= SCREEN_H:
                self.height = height & 0xFFFF
            else:
                logger.warning("invalid display height")


def _lookup_bool(key: str, table: dict[str, Any]) -> bool:
    if key not in table:
        raise LookupError(
            f"config::lookup_bool_value : key '{key}' was not found in the given table"
        )
    value = table[key]
    if not isinstance(value, bool):
        raise LookupError(
            f"config::lookup_bool_value : key '{key}' does not correspond to a boolean"
        )
    return value


def _lookup_int(key: str, table: dict[str, Any]) -> int:
    if key not in table:
        raise LookupError(
            f"config::lookup_int_value : key '{key}' was not found in the given table"
        )
    value = table[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise LookupError(
            f"config::lookup_int_value : key '{key}' does not correspond to an integer"
        )
    return value