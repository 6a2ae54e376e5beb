"""Button state tracking, key press/hold snapshots and haptic effect queueing."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Iterable

__all__ = [
    "Button",
    "HapticId",
    "InputData",
    "InputButton",
    "InputDevice",
    "HapticQueue",
    "normalize_axis",
    "LSTICK_DEADZONE",
    "RSTICK_DEADZONE",
    "LTRIGGER_DEADZONE",
    "RTRIGGER_DEADZONE",
]

LSTICK_DEADZONE = 0.3
RSTICK_DEADZONE = 0.3
LTRIGGER_DEADZONE = 0.3
RTRIGGER_DEADZONE = 0.3


class Button(IntEnum):
    """Logical buttons; ``ANY`` mirrors whether any other button went down."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    BUTTON_A = 4
    BUTTON_B = 5
    BUTTON_C = 6
    START = 7
    ANY = 8


# Bit in a check flag mask for each field of InputData, in order.
_FLAG_FIELDS = (
    (0x01, "up", Button.UP),
    (0x02, "down", Button.DOWN),
    (0x04, "left", Button.LEFT),
    (0x08, "right", Button.RIGHT),
    (0x10, "a", Button.BUTTON_A),
    (0x20, "b", Button.BUTTON_B),
    (0x40, "c", Button.BUTTON_C),
    (0x80, "start", Button.START),
)


class HapticId(IntEnum):
    """Haptic effect identifiers, plus the ``NONE`` and ``STOP`` markers."""

    NONE = -2
    STOP = -1
    SHARP_CLICK_100 = 0
    SHARP_CLICK_66 = 1
    SHARP_CLICK_33 = 2
    STRONG_CLICK_100 = 3
    STRONG_CLICK_66 = 4
    STRONG_CLICK_33 = 5
    BUMP_100 = 6
    BUMP_66 = 7
    BUMP_33 = 8
    BOUNCE_100 = 9
    BOUNCE_66 = 10
    BOUNCE_33 = 11
    DOUBLE_SHARP_CLICK_100 = 12
    DOUBLE_SHARP_CLICK_66 = 13
    DOUBLE_SHARP_CLICK_33 = 14
    DOUBLE_STRONG_CLICK_100 = 15
    DOUBLE_STRONG_CLICK_66 = 16
    DOUBLE_STRONG_CLICK_33 = 17
    DOUBLE_BUMP_100 = 18
    DOUBLE_BUMP_66 = 19
    DOUBLE_BUMP_33 = 20
    TRIPLE_STRONG_CLICK_100 = 21
    TRIPLE_STRONG_CLICK_66 = 22
    TRIPLE_STRONG_CLICK_33 = 23
    TICK_100 = 24
    TICK_66 = 25
    TICK_33 = 26
    LONG_BUZZ_100 = 27
    LONG_BUZZ_66 = 28
    LONG_BUZZ_33 = 29
    SHORT_BUZZ_100 = 30
    SHORT_BUZZ_66 = 31
    SHORT_BUZZ_33 = 32
    LONG_TRANSITION_RAMP_UP_100 = 33
    LONG_TRANSITION_RAMP_UP_66 = 34
    LONG_TRANSITION_RAMP_UP_33 = 35
    SHORT_TRANSITION_RAMP_UP_100 = 36
    SHORT_TRANSITION_RAMP_UP_66 = 37
    SHORT_TRANSITION_RAMP_UP_33 = 38
    LONG_TRANSITION_RAMP_DOWN_100 = 39
    LONG_TRANSITION_RAMP_DOWN_66 = 40
    LONG_TRANSITION_RAMP_DOWN_33 = 41
    SHORT_TRANSITION_RAMP_DOWN_100 = 42
    SHORT_TRANSITION_RAMP_DOWN_66 = 43
    SHORT_TRANSITION_RAMP_DOWN_33 = 44
    FAST_PULSE_100 = 45
    FAST_PULSE_66 = 46
    FAST_PULSE_33 = 47
    FAST_PULSING_100 = 48
    FAST_PULSING_66 = 49
    FAST_PULSING_33 = 50
    SLOW_PULSE_100 = 51
    SLOW_PULSE_66 = 52
    SLOW_PULSE_33 = 53
    SLOW_PULSING_100 = 54
    SLOW_PULSING_66 = 55
    SLOW_PULSING_33 = 56
    TRANSITION_BUMP_100 = 57
    TRANSITION_BUMP_66 = 58
    TRANSITION_BUMP_33 = 59
    TRANSITION_BOUNCE_100 = 60
    TRANSITION_BOUNCE_66 = 61
    TRANSITION_BOUNCE_33 = 62
    ALERT1 = 63
    ALERT2 = 64
    ALERT3 = 65
    ALERT4 = 66
    ALERT5 = 67
    ALERT6 = 68
    ALERT7 = 69
    ALERT8 = 70
    ALERT9 = 71
    ALERT10 = 72
    EXPLOSION1 = 73
    EXPLOSION2 = 74
    EXPLOSION3 = 75
    EXPLOSION4 = 76
    EXPLOSION5 = 77
    EXPLOSION6 = 78
    EXPLOSION7 = 79
    EXPLOSION8 = 80
    EXPLOSION9 = 81
    EXPLOSION10 = 82
    WEAPON1 = 83
    WEAPON2 = 84
    WEAPON3 = 85
    WEAPON4 = 86
    WEAPON5 = 87
    WEAPON6 = 88
    WEAPON7 = 89
    WEAPON8 = 90
    WEAPON9 = 91
    WEAPON10 = 92
    IMPACT_WOOD_100 = 93
    IMPACT_WOOD_66 = 94
    IMPACT_WOOD_33 = 95
    IMPACT_METAL_100 = 96
    IMPACT_METAL_66 = 97
    IMPACT_METAL_33 = 98
    IMPACT_RUBBER_100 = 99
    IMPACT_RUBBER_66 = 100
    IMPACT_RUBBER_33 = 101
    TEXTURE1 = 102
    TEXTURE2 = 103
    TEXTURE3 = 104
    TEXTURE4 = 105
    TEXTURE5 = 106
    TEXTURE6 = 107
    TEXTURE7 = 108
    TEXTURE8 = 109
    TEXTURE9 = 110
    TEXTURE10 = 111
    ENGINE1_100 = 112
    ENGINE1_66 = 113
    ENGINE1_33 = 114
    ENGINE2_100 = 115
    ENGINE2_66 = 116
    ENGINE2_33 = 117
    ENGINE3_100 = 118
    ENGINE3_66 = 119
    ENGINE3_33 = 120
    ENGINE4_100 = 121
    ENGINE4_66 = 122
    ENGINE4_33 = 123


@dataclass(frozen=True)
class InputData:
    """A snapshot of the eight game buttons."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    a: bool = False
    b: bool = False
    c: bool = False
    start: bool = False


@dataclass
class InputButton:
    """One button: ``press`` is true only on the frame it went down."""

    press: bool = False
    hold: bool = False
    key_mapping: int = 0
    cont_mapping: int = 0

    def set_held(self) -> None:
        """Mark the button held; it counts as pressed if it was not held before."""
        self.press = not self.hold
        self.hold = True

    def set_released(self) -> None:
        """Mark the button up."""
        self.press = False
        self.hold = False

    def is_down(self) -> bool:
        """Whether the button is pressed or held."""
        return self.press or self.hold


@dataclass
class InputDevice:
    """State of all logical buttons, updated once per frame."""

    buttons: dict[Button, InputButton] = field(default_factory=lambda: {b: InputButton() for b in Button})
    any_press: bool = False

    def __init__(self) -> None:
        self.buttons = {button: InputButton() for button in Button}
        self.any_press = False

    def __getitem__(self, button: Button) -> InputButton:
        return self.buttons[button]

    def update(self, held: Iterable[Button]) -> None:
        """Advance one frame given the set of buttons currently held down."""
        held_now = set(held)
        held_now.discard(Button.ANY)
        any_button = self.buttons[Button.ANY]
        for button in Button:
            if button is Button.ANY:
                continue
            state = self.buttons[button]
            if button in held_now:
                state.set_held()
                if not any_button.hold:
                    any_button.set_held()
            elif state.hold:
                state.set_released()
        if not held_now:
            any_button.set_released()

    def check_key_press(self, input_data: InputData, flags: int, touches_down: Iterable[bool] = ()) -> InputData:
        """Return ``input_data`` with the flagged fields set from this frame's presses.

        When the start bit (0x80) is set, ``any_press`` is also refreshed: it is
        true if any button was pressed this frame or any touch is down.
        """
        changes = {name: self.buttons[button].press for bit, name, button in _FLAG_FIELDS if flags & bit}
        if flags & 0x80:
            self.any_press = self.buttons[Button.ANY].press or any(touches_down)
        return replace(input_data, **changes)

    def check_key_down(self, input_data: InputData, flags: int) -> InputData:
        """Return ``input_data`` with the flagged fields set from held buttons."""
        changes = {name: self.buttons[button].hold for bit, name, button in _FLAG_FIELDS if flags & bit}
        return replace(input_data, **changes)


class HapticQueue:
    """Holds the most recently queued haptic effect until it is taken."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.effect: int = HapticId.NONE

    def queue(self, haptic_id: int) -> None:
        """Queue an effect; ignored while haptics are disabled."""
        if self.enabled:
            self.effect = haptic_id

    def take(self) -> int:
        """Return the queued effect and clear the queue."""
        effect = self.effect
        self.effect = HapticId.NONE
        return effect


def normalize_axis(axis: int) -> float:
    """Map a signed 16-bit stick axis to the range -1.0 .. 1.0."""
    if axis < 0:
        return -((-axis - 1) / (32768 - 1))
    return axis / 32767