"""Digital button state driven by a keyboard snapshot, plus mouse position."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional

PLAYER_COUNT = 4
INPUTDEVICE_COUNT = 16


class InputSlotIDs(Enum):
    ANY = 0
    P1 = 1
    P2 = 2
    P3 = 3
    P4 = 4


class InputDeviceTypes(Enum):
    NONE = 0
    KEYBOARD = 1
    CONTROLLER = 2
    UNKNOWN = 3


class InputButtons(IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    A = 4
    B = 5
    X = 6
    Y = 7
    START = 8
    SELECT = 9
    ANY = 10


INPUT_MAX = len(InputButtons)


@dataclass
class InputData:
    """A snapshot of every button of one controller."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    a: bool = False
    b: bool = False
    x: bool = False
    y: bool = False
    start: bool = False


@dataclass
class InputButton:
    """One button: pressed this frame, and held."""

    press: bool = False
    hold: bool = False
    key_mapping: Optional[int] = None
    pad_mapping: Optional[int] = None

    def set_held(self) -> None:
        self.press = not self.hold
        self.hold = True

    def set_released(self) -> None:
        self.press = False
        self.hold = False

    def down(self) -> bool:
        return self.press or self.hold


def _key_down(key_state: Any, mapping: Optional[int]) -> bool:
    if mapping is None:
        return False
    try:
        return bool(key_state[mapping])
    except (IndexError, KeyError):
        return False


class InputState:
    """The state of all buttons and of the mouse."""

    def __init__(self) -> None:
        self.buttons = {button: InputButton() for button in InputButtons}
        self.mouse_x = 0
        self.mouse_y = 0

    def init(self) -> None:
        """Map the arrow keys to the direction buttons."""
        import pygame

        self.buttons[InputButtons.UP].key_mapping = pygame.K_UP
        self.buttons[InputButtons.DOWN].key_mapping = pygame.K_DOWN
        self.buttons[InputButtons.LEFT].key_mapping = pygame.K_LEFT
        self.buttons[InputButtons.RIGHT].key_mapping = pygame.K_RIGHT

    def clear(self) -> None:
        """Release every button and reset the mouse position."""
        for button in self.buttons.values():
            button.set_released()
        self.mouse_x = 0
        self.mouse_y = 0

    def process(self, key_state: Any, mouse_pos: tuple[float, float]) -> None:
        """Update buttons from a key-state lookup and store the mouse position.

        ``key_state`` is indexed by key code, as returned by
        ``pygame.key.get_pressed()``; a mapping works as well.
        """
        any_button = self.buttons[InputButtons.ANY]
        for button in InputButtons:
            if button is InputButtons.ANY:
                continue
            state = self.buttons[button]
            if _key_down(key_state, state.key_mapping):
                state.set_held()
                if not any_button.hold:
                    any_button.set_held()
            else:
                state.set_released()
        self.mouse_x = int(mouse_pos[0])
        self.mouse_y = int(mouse_pos[1])

    def release(self) -> None:
        """Forget all key mappings and button state."""
        self.clear()
        for button in self.buttons.values():
            button.key_mapping = None
            button.pad_mapping = None

    def is_button_down(self, button: InputButtons) -> bool:
        return self.buttons[InputButtons(button)].hold

    def is_button_pressed(self, button: InputButtons) -> bool:
        return self.buttons[InputButtons(button)].press