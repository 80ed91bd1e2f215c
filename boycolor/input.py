"""Keyboard bindings for the virtual joypad."""

import logging
import tomllib
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class InputConfigError(Exception):
    """The keyboard binding cannot be built."""


class JoypadKey(Enum):
    """The buttons of the Game Boy joypad."""

    UP = "Up"
    DOWN = "Down"
    LEFT = "Left"
    RIGHT = "Right"
    SELECT = "Select"
    START = "Start"
    A = "A"
    B = "B"

    def __str__(self) -> str:
        return self.value


JOYPAD_KEYS: tuple[JoypadKey, ...] = tuple(JoypadKey)


@dataclass(frozen=True)
class KeyboardBinding:
    """A keyboard layout, or a configuration file that describes one."""

    layout: str
    path: Path | None = None

    QWERTY: ClassVar["KeyboardBinding"]
    AZERTY: ClassVar["KeyboardBinding"]

    @classmethod
    def from_config_file(cls, path: str | Path) -> "KeyboardBinding":
        """A binding read from the [input.keyboard] table of a TOML file."""
        return cls("file", Path(path))

    def __str__(self) -> str:
        if self.path is not None:
            return f'in configuration file "{self.path}"'
        return self.layout


KeyboardBinding.QWERTY = KeyboardBinding("QWERTY")
KeyboardBinding.AZERTY = KeyboardBinding("AZERTY")

_LAYOUTS: dict[str, dict[str, JoypadKey]] = {
    "QWERTY": {
        "W": JoypadKey.UP,
        "S": JoypadKey.DOWN,
        "A": JoypadKey.LEFT,
        "D": JoypadKey.RIGHT,
        "Z": JoypadKey.SELECT,
        "C": JoypadKey.START,
        "G": JoypadKey.A,
        "Y": JoypadKey.B,
    },
    "AZERTY": {
        "Z": JoypadKey.UP,
        "S": JoypadKey.DOWN,
        "Q": JoypadKey.LEFT,
        "D": JoypadKey.RIGHT,
        "W": JoypadKey.SELECT,
        "C": JoypadKey.START,
        "G": JoypadKey.A,
        "Y": JoypadKey.B,
    },
}


def get_key_bindings(
    binding: KeyboardBinding, symbol_backend_keys: Mapping[str, K]
) -> dict[K, JoypadKey]:
    """Map a backend's key codes to joypad keys for the given binding.

    ``symbol_backend_keys`` gives the backend key code for each symbol such as
    "A", "Up", "Numpad1" or "F5"; a symbol it lacks is an error.
    """
    bindings: dict[K, JoypadKey] = {}
    for symbol, control in build_keyboard_control_map(binding).items():
        try:
            key = symbol_backend_keys[symbol]
        except KeyError:
            raise InputConfigError(f'backend does not support key "{symbol}"') from None
        bindings[key] = control
    return bindings


def build_keyboard_control_map(binding: KeyboardBinding) -> dict[str, JoypadKey]:
    """Return the symbol-to-joypad-key map of a binding."""
    if binding.path is None:
        try:
            return dict(_LAYOUTS[binding.layout])
        except KeyError:
            raise InputConfigError(f"unknown keyboard layout {binding.layout!r}") from None
    try:
        content = binding.path.read_text()
    except (OSError, UnicodeDecodeError):
        raise InputConfigError(
            f"could not load the input config file : {binding.path}"
        ) from None
    return keyboard_map_from_config(content, str(binding.path))


def _qwerty_fallback(message: str, *args: object) -> dict[str, JoypadKey]:
    logger.warning(message, *args)
    return build_keyboard_control_map(KeyboardBinding.QWERTY)


def keyboard_map_from_config(config_str: str, config_file: str) -> dict[str, JoypadKey]:
    """Read the [input.keyboard] table of a TOML document.

    A missing section or key falls back to QWERTY; a key bound to a
    non-string value or a symbol bound twice is an error.
    """
    try:
        table = tomllib.loads(config_str)
    except tomllib.TOMLDecodeError as err:
        raise InputConfigError(
            f'parsing error in input config file "{config_file}" : {err}'
        ) from err

    if "input" not in table:
        return _qwerty_fallback(
            'input config file "%s" does not specify any input configuration, '
            "reverting to QWERTY.",
            config_file,
        )
    section = table["input"]
    if not isinstance(section, dict):
        raise InputConfigError(f'no input section specified in "{config_file}"')
    if "keyboard" not in section:
        return _qwerty_fallback(
            'input config file "%s" does not specify keyboard input, reverting to QWERTY.',
            config_file,
        )
    keyboard = section["keyboard"]
    if not isinstance(keyboard, dict):
        raise InputConfigError(f'no input.keyboard subsection specified in "{config_file}"')

    controls: dict[str, JoypadKey] = {}
    for key in JOYPAD_KEYS:
        if str(key) not in keyboard:
            return _qwerty_fallback(
                'no key specified for "%s" in input config, reverting to QWERTY', key
            )
        symbol = keyboard[str(key)]
        if not isinstance(symbol, str):
            raise InputConfigError(
                f'key "{key}" does not have a String value in input config'
            )
        if symbol in controls:
            logger.warning(
                'input config file "%s" binds key "%s" more than once, '
                "earlier occurences will be erased",
                config_file,
                symbol,
            )
        controls[symbol] = key

    if len(controls) != len(JOYPAD_KEYS):
        raise InputConfigError(f'missing joypad key(s) in input config file "{config_file}"')
    return controls