# retrokit

Building blocks of a retro 2D game engine, as plain Python modules with no
third-party dependencies:

- `retrokit.ini`: reads and writes the engine's INI settings files.
  `IniParser.parse(text)` and `IniParser.load(path)` build a parser;
  `get_string`, `get_integer`, `get_float` and `get_bool` return `None` for a
  missing key; `set_string`, `set_integer`, `set_float`, `set_bool` and
  `set_comment` add or replace entries; `dumps()` and `write(path)` render it.
- `retrokit.trig`: fixed-point lookup tables (`SIN512_TABLE`, `COS512_TABLE`,
  `SIN256_TABLE`, ...) with `sin512`, `cos512`, `sin256`, `cos256`, and
  `arc_tan_lookup(x, y)`, which returns a vector's angle as a byte
  (256 steps per turn).
- `retrokit.reader`: reads files out of encrypted data packs (`DataPack`,
  `FileReader`, `Cipher`, `FileInfo`), opens ordinary files through the same
  reader (`open_plain_file`), builds packs (`build_pack`) and turns forward
  slashes into backslashes (`copy_file_path`).
- `retrokit.controls`: per-frame button state (`InputDevice`, `InputButton`,
  `Button`), press and hold snapshots selected by a flag mask
  (`check_key_press`, `check_key_down`, returning new `InputData` values),
  a haptic effect queue (`HapticQueue`, `HapticId`) and `normalize_axis` for
  signed 16-bit stick axes.
- `retrokit.palette`: a bank of eight 256-colour palettes (`PaletteBank`) kept
  both as packed 16-bit colours (RGB565 for `RenderType.SW`, RGB5551 for
  `RenderType.HW`) and as `PaletteEntry` triples, with per-line palette
  selection, copying, rotation, fades and loading from raw RGB bytes.
- `retrokit.player`: player state (`Player`, `ControlMode`) and
  `InputHistory`, which records sixteen frames of input so that a sidekick
  replays what was pressed sixteen frames earlier.
- `retrokit.objects`: entities (`Entity`, `ObjectPriority`), the activity
  rules for each priority (`is_entity_active`), and the update passes
  `process_objects` and `process_paused_objects`, which call your function for
  each entity to run and return one list of entity indices per draw layer.
- `retrokit.mods`: mod discovery (`load_mod`, `load_mods`), replacement file
  scanning (`scan_mod_folder`, `find_mod_file`), writing `modconfig.ini`
  (`save_mods`), combining active mods' settings (`apply_active_mods`,
  `ModSettings`), case-insensitive path lookup (`resolve_path`) and stage
  name matching (`get_scene_id`).

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

Settings files:

```python
from retrokit.ini import IniParser

ini = IniParser.parse("[Game]\nLanguage=0\nDevMenu=true\n")
ini.get_integer("Game", "Language")   # 0
ini.get_bool("Game", "DevMenu")       # True
ini.get_string("Game", "Missing")     # None
ini.set_float("Window", "Scale", 2.0)
print(ini.dumps())
```

Reading a file out of a data pack:

```python
from retrokit.reader import DataPack, build_pack

pack_bytes = build_pack({"Data/Game/GameConfig.bin": b"\x01\x02\x03"})
with open("Data.rsdk", "wb") as handle:
    handle.write(pack_bytes)

pack = DataPack("Data.rsdk")
with pack.open("Data/Game/GameConfig.bin") as reader:
    print(reader.read(3))   # b'\x01\x02\x03'
```

`DataPack.open` raises `FileNotFoundError` for a path that is not in the pack.

Fixed-point trig:

```python
from retrokit.trig import sin512, cos256, arc_tan_lookup

sin512(0x80)            # 512
cos256(0)               # 256
arc_tan_lookup(1, 0)    # 0
```

Running objects for a frame:

```python
from retrokit.objects import Entity, ObjectPriority, process_objects

entities = [Entity(type=1, priority=ObjectPriority.ACTIVE, draw_order=3)]
draw_lists = process_objects(entities, 0, 0, lambda index, entity: None)
draw_lists[3]   # [0]
```

## What it does not do

retrokit holds the engine's data handling and rules only. It does not open a
window, draw or render anything, play audio or video, read a keyboard or game
controller, or run game scripts, and it has no game loop and no command to
run. Input arrives as the set of buttons you pass to `InputDevice.update`, and
the work done for each entity is the function you pass to `process_objects`.