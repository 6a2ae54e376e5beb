from retrokit.objects import (
    DRAW_LAYER_COUNT,
    OBJ_TYPE_BLANKOBJECT,
    OBJECT_BORDER_Y2,
    Entity,
    ObjectPriority,
    is_entity_active,
    normalize_type_name,
    process_objects,
    process_paused_objects,
)


def at(x, y, **kwargs):
    return Entity(x_pos=x << 16, y_pos=y << 16, **kwargs)


def collect():
    calls = []

    def run(index, entity):
        calls.append(index)

    return calls, run


def test_normalize_type_name():
    assert normalize_type_name("Blank Object") == "BlankObject"
    assert normalize_type_name(" Ring ") == "Ring"


def test_bounds_priority():
    assert is_entity_active(at(50, 50), 0, 0, 0x80, 400) is True
    assert is_entity_active(at(500, 50), 0, 0, 0x80, 400) is False
    assert is_entity_active(at(50, OBJECT_BORDER_Y2), 0, 0, 0x80, 400) is False


def test_xbounds_ignores_y():
    entity = at(50, 100000, priority=ObjectPriority.XBOUNDS)
    assert is_entity_active(entity, 0, 0, 0x80, 400) is True


def test_always_and_inactive():
    assert is_entity_active(at(99999, 99999, priority=ObjectPriority.ALWAYS), 0, 0) is True
    assert is_entity_active(at(0, 0, priority=ObjectPriority.INACTIVE), 0, 0, 0x80, 400) is False


def test_process_objects_runs_active_and_builds_draw_lists():
    entities = [
        at(10, 10, type=1, draw_order=2),
        at(10, 10, type=OBJ_TYPE_BLANKOBJECT),
        at(900, 10, type=3),
        at(10, 10, type=4, draw_order=DRAW_LAYER_COUNT),
        at(10, 10, type=5, draw_order=2),
    ]
    calls, run = collect()
    lists = process_objects(entities, 0, 0, run, 0x80, 400)
    assert calls == [0, 3, 4]
    assert lists[2] == [0, 4]
    assert sum(len(layer) for layer in lists) == 2
    assert len(lists) == DRAW_LAYER_COUNT


def test_draw_order_read_after_update():
    entities = [at(10, 10, type=1, draw_order=0)]

    def run(index, entity):
        entity.draw_order = 3

    lists = process_objects(entities, 0, 0, run, 0x80, 400)
    assert lists[3] == [0]
    assert lists[0] == []


def test_bounds_destroy_blanks_out_of_range():
    far = at(900, 10, type=7, priority=ObjectPriority.BOUNDS_DESTROY)
    near = at(10, 10, type=7, priority=ObjectPriority.BOUNDS_DESTROY)
    calls, run = collect()
    process_objects([far, near], 0, 0, run, 0x80, 400)
    assert far.type == OBJ_TYPE_BLANKOBJECT
    assert near.type == 7
    assert calls == [1]


def test_paused_runs_only_always():
    entities = [
        at(0, 0, type=1, priority=ObjectPriority.ACTIVE),
        at(0, 0, type=2, priority=ObjectPriority.ALWAYS, draw_order=1),
        at(0, 0, type=OBJ_TYPE_BLANKOBJECT, priority=ObjectPriority.ALWAYS),
    ]
    calls, run = collect()
    lists = process_paused_objects(entities, run)
    assert calls == [1]
    assert lists[1] == [1]