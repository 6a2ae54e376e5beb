"""Player control state and the input history that drives a sidekick."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional

from retrokit.controls import InputData

__all__ = ["PLAYER_COUNT", "ControlMode", "Player", "InputHistory"]

PLAYER_COUNT = 2
_HISTORY_MASK = 0xFFFF


class ControlMode(IntEnum):
    """Where a player's inputs come from."""

    NONE = -1
    NORMAL = 0
    SIDEKICK = 1


@dataclass
class Player:
    """A player's physics, collision and control state."""

    entity_no: int = 0
    x_pos: int = 0
    y_pos: int = 0
    x_velocity: int = 0
    y_velocity: int = 0
    speed: int = 0
    screen_x_pos: int = 0
    screen_y_pos: int = 0
    angle: int = 0
    timer: int = 0
    look_pos: int = 0
    values: list[int] = field(default_factory=lambda: [0] * 8)
    collision_mode: int = 0
    skidding: int = 0
    pushing: int = 0
    collision_plane: int = 0
    control_mode: int = ControlMode.NORMAL
    control_lock: int = 0
    top_speed: int = 0
    acceleration: int = 0
    deceleration: int = 0
    air_acceleration: int = 0
    air_deceleration: int = 0
    gravity_strength: int = 0
    jump_strength: int = 0
    jump_cap: int = 0
    rolling_acceleration: int = 0
    rolling_deceleration: int = 0
    visible: int = 0
    tile_collisions: int = 0
    object_interactions: int = 0
    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    jump_press: bool = False
    jump_hold: bool = False
    follow_player1: int = 0
    track_scroll: int = 0
    gravity: int = 0
    water: int = 0
    flailing: list[int] = field(default_factory=lambda: [0] * 3)
    animation_file: Optional[Any] = None
    bound_entity: Optional[Any] = None


def _push(history: int, bit: bool) -> int:
    return ((history << 1) | int(bool(bit))) & _HISTORY_MASK


def _oldest(history: int) -> bool:
    return bool(history >> 15)


@dataclass
class InputHistory:
    """Sixteen frames of recorded inputs, one bit per frame, newest in bit 0."""

    up: int = 0
    down: int = 0
    left: int = 0
    right: int = 0
    jump_press: int = 0
    jump_hold: int = 0

    def _record(self, player: Player) -> None:
        self.up = _push(self.up, player.up)
        self.down = _push(self.down, player.down)
        self.left = _push(self.left, player.left)
        self.right = _push(self.right, player.right)
        self.jump_press = _push(self.jump_press, player.jump_press)
        self.jump_hold = _push(self.jump_hold, player.jump_hold)

    def process(self, player: Player, key_down: InputData, key_press: InputData) -> None:
        """Update ``player``'s inputs for one frame according to its control mode.

        Normal players take the keys and are recorded, players with no control
        are recorded as they are, and sidekicks replay the inputs recorded
        sixteen frames earlier.
        """
        if player.control_mode == ControlMode.SIDEKICK:
            player.up = _oldest(self.up)
            player.down = _oldest(self.down)
            player.left = _oldest(self.left)
            player.right = _oldest(self.right)
            player.jump_press = _oldest(self.jump_press)
            player.jump_hold = _oldest(self.jump_hold)
            return
        if player.control_mode != ControlMode.NONE:
            player.up = key_down.up
            player.down = key_down.down
            if key_down.left and key_down.right:
                player.left = False
                player.right = False
            else:
                player.left = key_down.left
                player.right = key_down.right
            player.jump_hold = key_down.c or key_down.b or key_down.a
            player.jump_press = key_press.c or key_press.b or key_press.a
        self._record(player)