"""Entities, their activity rules and the per-frame object update pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Sequence

__all__ = [
    "ENTITY_COUNT",
    "TEMPENTITY_START",
    "OBJECT_COUNT",
    "DRAW_LAYER_COUNT",
    "OBJ_TYPE_BLANKOBJECT",
    "OBJECT_BORDER_X1",
    "OBJECT_BORDER_X2",
    "OBJECT_BORDER_Y1",
    "OBJECT_BORDER_Y2",
    "ObjectPriority",
    "Entity",
    "normalize_type_name",
    "is_entity_active",
    "process_objects",
    "process_paused_objects",
]

ENTITY_COUNT = 0x4A0
TEMPENTITY_START = ENTITY_COUNT - 0x80
OBJECT_COUNT = 0x100
DRAW_LAYER_COUNT = 7
SCREEN_YSIZE = 240

OBJ_TYPE_BLANKOBJECT = 0

OBJECT_BORDER_X1 = 0x80
OBJECT_BORDER_X2 = 0
OBJECT_BORDER_Y1 = 0x100
OBJECT_BORDER_Y2 = SCREEN_YSIZE + 0x100


class ObjectPriority(IntEnum):
    """When an entity is updated."""

    BOUNDS = 0
    ACTIVE = 1
    ALWAYS = 2
    XBOUNDS = 3
    BOUNDS_DESTROY = 4
    INACTIVE = 5


@dataclass
class Entity:
    """One object instance; positions are 16.16 fixed point."""

    x_pos: int = 0
    y_pos: int = 0
    values: list[int] = field(default_factory=lambda: [0] * 8)
    scale: int = 0
    rotation: int = 0
    animation_timer: int = 0
    animation_speed: int = 0
    type: int = OBJ_TYPE_BLANKOBJECT
    property_value: int = 0
    state: int = 0
    priority: int = ObjectPriority.BOUNDS
    draw_order: int = 0
    direction: int = 0
    ink_effect: int = 0
    alpha: int = 0
    animation: int = 0
    prev_animation: int = 0
    frame: int = 0


RunEntity = Callable[[int, Entity], None]


def normalize_type_name(name: str) -> str:
    """Return an object type name with its spaces removed."""
    return name.replace(" ", "")


def _in_x_bounds(x: int, x_scroll: int, border_x1: int, border_x2: int) -> bool:
    return x_scroll - border_x1 < x < border_x2 + x_scroll


def _in_bounds(entity: Entity, x_scroll: int, y_scroll: int, border_x1: int, border_x2: int) -> bool:
    x = entity.x_pos >> 16
    y = entity.y_pos >> 16
    return _in_x_bounds(x, x_scroll, border_x1, border_x2) and (
        y_scroll - OBJECT_BORDER_Y1 < y < y_scroll + OBJECT_BORDER_Y2
    )


def is_entity_active(
    entity: Entity,
    x_scroll: int,
    y_scroll: int,
    border_x1: int = OBJECT_BORDER_X1,
    border_x2: int = OBJECT_BORDER_X2,
) -> bool:
    """Whether ``entity`` should be updated this frame given its priority and the camera."""
    priority = entity.priority
    if priority in (ObjectPriority.BOUNDS, ObjectPriority.BOUNDS_DESTROY):
        return _in_bounds(entity, x_scroll, y_scroll, border_x1, border_x2)
    if priority in (ObjectPriority.ACTIVE, ObjectPriority.ALWAYS):
        return True
    if priority == ObjectPriority.XBOUNDS:
        return _in_x_bounds(entity.x_pos >> 16, x_scroll, border_x1, border_x2)
    return False


def _add_to_draw_list(draw_lists: list[list[int]], index: int, entity: Entity) -> None:
    if 0 <= entity.draw_order < DRAW_LAYER_COUNT:
        draw_lists[entity.draw_order].append(index)


def process_objects(
    entities: Sequence[Entity],
    x_scroll: int,
    y_scroll: int,
    run_entity: RunEntity,
    border_x1: int = OBJECT_BORDER_X1,
    border_x2: int = OBJECT_BORDER_X2,
) -> list[list[int]]:
    """Run every active, non-blank entity and return the draw lists.

    ``run_entity`` is called with each entity's index and the entity itself.
    Entities with the bounds-destroy priority that are out of bounds are
    turned into blank objects.  The result holds one list of entity indices
    per draw layer, in update order.
    """
    draw_lists: list[list[int]] = [[] for _ in range(DRAW_LAYER_COUNT)]
    for index, entity in enumerate(entities):
        active = is_entity_active(entity, x_scroll, y_scroll, border_x1, border_x2)
        if not active and entity.priority == ObjectPriority.BOUNDS_DESTROY:
            entity.type = OBJ_TYPE_BLANKOBJECT
        if active and entity.type > OBJ_TYPE_BLANKOBJECT:
            run_entity(index, entity)
            _add_to_draw_list(draw_lists, index, entity)
    return draw_lists


def process_paused_objects(entities: Sequence[Entity], run_entity: RunEntity) -> list[list[int]]:
    """Run only the non-blank entities whose priority is ``ALWAYS``; return the draw lists."""
    draw_lists: list[list[int]] = [[] for _ in range(DRAW_LAYER_COUNT)]
    for index, entity in enumerate(entities):
        if entity.priority == ObjectPriority.ALWAYS and entity.type > OBJ_TYPE_BLANKOBJECT:
            run_entity(index, entity)
            _add_to_draw_list(draw_lists, index, entity)
    return draw_lists