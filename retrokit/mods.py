"""Mod discovery, settings and file redirection.

A mods folder holds one sub-folder per mod, each with a ``mod.ini`` that
describes it, and optionally a ``modconfig.ini`` that lists mod folders in
load order under a ``[mods]`` section with their active flags.  A mod may
replace game files by shipping them under ``Data/``, ``Scripts/`` or
``Videos/``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from retrokit.ini import IniParser

__all__ = [
    "ModInfo",
    "ModSettings",
    "resolve_path",
    "scan_mod_folder",
    "load_mod",
    "load_mods",
    "save_mods",
    "apply_active_mods",
    "find_mod_file",
    "get_scene_id",
]

_log = logging.getLogger(__name__)

PathArg = Union[str, PathLike]

_REPLACEMENT_FOLDERS = (
    ("Data", ("Data/", "Data\\", "data/", "data\\")),
    ("Scripts", ("Scripts/", "Scripts\\", "scripts/", "scripts\\")),
    ("Videos", ("Videos/", "Videos\\", "videos/", "videos\\")),
)


@dataclass
class ModInfo:
    """Everything known about one mod."""

    name: str = ""
    desc: str = ""
    author: str = ""
    version: str = ""
    file_map: dict[str, str] = field(default_factory=dict)
    folder: str = ""
    use_scripts: bool = False
    disable_focus_pause: int = 0
    redirect_save: bool = False
    disable_save_ini_override: bool = False
    save_path: str = ""
    active: bool = False


@dataclass
class ModSettings:
    """Engine settings after the active mods have been taken into account."""

    force_use_scripts: bool = False
    disable_focus_pause: int = 0
    redirect_save: bool = False
    disable_save_ini_override: bool = False
    save_path: str = ""


def resolve_path(path: PathArg) -> Path:
    """Find ``path`` ignoring the case of its last component.

    Relative paths are taken from the current directory.  If no entry of the
    parent directory matches, the (absolute) path is returned unchanged.
    """
    given = Path(path)
    if not given.is_absolute():
        given = Path.cwd() / given
    try:
        entries = sorted(given.parent.iterdir())
    except OSError:
        return given
    target = given.name.lower()
    return next((entry for entry in entries if entry.name.lower() == target), given)


def _walk_files(root: Path) -> Iterable[str]:
    def report(error: OSError) -> None:
        _log.warning("Folder scanning error: %s", error)

    for dirpath, dirnames, filenames in os.walk(root, onerror=report):
        dirnames.sort()
        for name in sorted(filenames):
            full = os.path.join(dirpath, name)
            if os.path.isfile(full):
                yield full


def scan_mod_folder(info: ModInfo, mods_dir: PathArg) -> None:
    """Add the mod's replacement files to ``info.file_map``.

    Keys are the lower-cased game paths (from the ``Data/``, ``Scripts/`` or
    ``Videos/`` part on, with forward slashes); values are the files' full
    paths.  Keys already present are kept.
    """
    mod_dir = resolve_path(mods_dir) / info.folder
    for folder, tokens in _REPLACEMENT_FOLDERS:
        root = resolve_path(mod_dir / folder)
        if not root.is_dir():
            continue
        for full in _walk_files(root):
            position = -1
            for token in tokens:
                position = full.find(token)
                if position >= 0:
                    break
            if position < 0:
                continue
            key = full[position:].replace("\\", "/").lower()
            info.file_map.setdefault(key, full)


def load_mod(mods_dir: PathArg, folder: str, active: bool) -> Optional[ModInfo]:
    """Load the mod in ``mods_dir/folder``; ``None`` if it has no ``mod.ini``."""
    ini_path = Path(mods_dir) / folder / "mod.ini"
    if not ini_path.is_file():
        return None
    settings = IniParser.load(ini_path)

    info = ModInfo(
        name="Unnamed Mod",
        desc="",
        author="Unknown Author",
        version="1.0.0",
        folder=folder,
        active=bool(active),
    )
    for key, attribute in (("Name", "name"), ("Description", "desc"), ("Author", "author"), ("Version", "version")):
        value = settings.get_string("", key)
        if value:
            setattr(info, attribute, value)

    scan_mod_folder(info, mods_dir)

    info.use_scripts = bool(settings.get_bool("", "TxtScripts"))
    info.disable_focus_pause = settings.get_integer("", "DisableFocusPause") or 0
    info.redirect_save = bool(settings.get_bool("", "RedirectSaveRAM"))
    if info.redirect_save:
        info.save_path = f"mods/{folder}/"
    info.disable_save_ini_override = bool(settings.get_bool("", "DisableSaveIniOverride"))
    return info


def load_mods(mods_dir: PathArg) -> list[ModInfo]:
    """Load every mod in ``mods_dir``.

    Mods listed in ``modconfig.ini`` come first, in its order and with its
    active flags; the remaining mod folders follow, inactive.
    """
    mods: list[ModInfo] = []
    mod_path = resolve_path(mods_dir)
    if not mod_path.is_dir():
        return mods

    config_path = mod_path / "modconfig.ini"
    if config_path.is_file():
        config = IniParser.load(config_path)
        for item in config.items:
            active = bool(config.get_bool("mods", item.key))
            info = load_mod(mod_path, item.key, active)
            if info is not None:
                mods.append(info)

    try:
        folders = sorted(entry for entry in mod_path.iterdir() if entry.is_dir())
    except OSError as error:
        _log.warning("Mods folder scanning error: %s", error)
        folders = []
    for entry in folders:
        if any(mod.folder == entry.name for mod in mods):
            continue
        info = load_mod(mod_path, entry.name, False)
        if info is not None:
            mods.append(info)
    return mods


def save_mods(mods: Sequence[ModInfo], mods_dir: PathArg) -> Optional[Path]:
    """Write the load order and active flags to ``modconfig.ini``.

    Returns the file written, or ``None`` if ``mods_dir`` is not a directory.
    """
    mod_path = resolve_path(mods_dir)
    if not mod_path.is_dir():
        return None
    config = IniParser()
    for info in mods:
        config.set_bool("mods", info.folder, info.active)
    target = mod_path / "modconfig.ini"
    config.write(target)
    return target


def apply_active_mods(
    mods: Iterable[ModInfo],
    force_use_scripts: bool = False,
    disable_focus_pause: int = 0,
) -> ModSettings:
    """Combine the configured settings with those requested by active mods."""
    settings = ModSettings(
        force_use_scripts=bool(force_use_scripts),
        disable_focus_pause=int(disable_focus_pause),
    )
    for info in mods:
        if not info.active:
            continue
        if info.use_scripts:
            settings.force_use_scripts = True
        if info.disable_focus_pause:
            settings.disable_focus_pause |= int(info.disable_focus_pause)
        if info.redirect_save:
            settings.save_path = info.save_path
            settings.redirect_save = True
        if info.disable_save_ini_override:
            settings.disable_save_ini_override = True
    return settings


def find_mod_file(mods: Sequence[ModInfo], path: str, active_mod: int = -1) -> Optional[str]:
    """Return the replacement for game file ``path``, or ``None``.

    Active mods are searched in order; with ``active_mod`` set, only that mod
    is searched.  The path is matched without regard to case.
    """
    key = path.lower()
    candidates = mods[active_mod:active_mod + 1] if active_mod != -1 else mods
    if active_mod < -1:
        candidates = []
    for info in candidates:
        if info.active and key in info.file_map:
            return info.file_map[key]
    return None


def get_scene_id(stage_names: Sequence[str], scene_name: str) -> Optional[int]:
    """Index of the stage whose name matches ``scene_name``, or ``None``.

    Spaces are ignored and letters compare without regard to case.
    """
    wanted = scene_name.replace(" ", "").upper()
    return next(
        (index for index, name in enumerate(stage_names) if name.replace(" ", "").upper() == wanted),
        None,
    )