import os
from pathlib import Path

import pytest

from retrokit.mods import (
    ModInfo,
    ModSettings,
    apply_active_mods,
    find_mod_file,
    get_scene_id,
    load_mod,
    load_mods,
    resolve_path,
    save_mods,
    scan_mod_folder,
)


def _make_mod(mods_dir: Path, folder: str, ini: str = "") -> Path:
    mod_dir = mods_dir / folder
    mod_dir.mkdir(parents=True)
    (mod_dir / "mod.ini").write_text(ini)
    return mod_dir


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")
    return path


@pytest.fixture
def mods_dir(tmp_path):
    target = tmp_path / "mods"
    target.mkdir()
    return target


def test_resolve_path_ignores_case(tmp_path):
    (tmp_path / "Mods").mkdir()
    assert resolve_path(tmp_path / "mods").name == "Mods"


def test_resolve_path_missing_returns_given(tmp_path):
    assert resolve_path(tmp_path / "nothing") == tmp_path / "nothing"


def test_resolve_path_relative(tmp_path, monkeypatch):
    (tmp_path / "Stuff").mkdir()
    monkeypatch.chdir(tmp_path)
    result = resolve_path("stuff")
    assert result.is_absolute()
    assert result.name == "Stuff"
    assert result.parent.resolve() == tmp_path.resolve()


def test_load_mod_defaults(mods_dir):
    _make_mod(mods_dir, "plain")
    info = load_mod(mods_dir, "plain", True)
    assert info.name == "Unnamed Mod"
    assert info.author == "Unknown Author"
    assert info.version == "1.0.0"
    assert info.desc == ""
    assert info.folder == "plain"
    assert info.active is True
    assert info.use_scripts is False
    assert info.redirect_save is False


def test_load_mod_reads_fields(mods_dir):
    _make_mod(
        mods_dir,
        "fancy",
        "Name=Fancy Mod\nDescription=Shiny\nAuthor=Someone\nVersion=2.1\n"
        "TxtScripts=true\nDisableFocusPause=3\nRedirectSaveRAM=true\nDisableSaveIniOverride=1\n",
    )
    info = load_mod(mods_dir, "fancy", False)
    assert (info.name, info.desc, info.author, info.version) == ("Fancy Mod", "Shiny", "Someone", "2.1")
    assert info.use_scripts is True
    assert info.disable_focus_pause == 3
    assert info.redirect_save is True
    assert info.save_path == "mods/fancy/"
    assert info.disable_save_ini_override is True
    assert info.active is False


def test_load_mod_without_ini(mods_dir):
    (mods_dir / "empty").mkdir()
    assert load_mod(mods_dir, "empty", True) is None


def test_scan_mod_folder_maps_replacements(mods_dir):
    mod_dir = _make_mod(mods_dir, "art")
    sprite = _touch(mod_dir / "Data" / "Sprites" / "Player.GIF")
    script = _touch(mod_dir / "Scripts" / "Global" / "Ring.txt")
    video = _touch(mod_dir / "Videos" / "Intro.ogv")
    info = ModInfo(folder="art")
    scan_mod_folder(info, mods_dir)
    assert info.file_map == {
        "data/sprites/player.gif": str(sprite),
        "scripts/global/ring.txt": str(script),
        "videos/intro.ogv": str(video),
    }


def test_load_mod_scans_files(mods_dir):
    mod_dir = _make_mod(mods_dir, "art")
    sprite = _touch(mod_dir / "Data" / "Game" / "Title.gif")
    info = load_mod(mods_dir, "art", True)
    assert info.file_map["data/game/title.gif"] == str(sprite)


def test_load_mods_follows_config_order(mods_dir):
    for folder in ("alpha", "beta", "gamma"):
        _make_mod(mods_dir, folder)
    (mods_dir / "notamod").mkdir()
    (mods_dir / "modconfig.ini").write_text("[mods]\nbeta=true\nalpha=false\n")
    mods = load_mods(mods_dir)
    assert [m.folder for m in mods] == ["beta", "alpha", "gamma"]
    assert [m.active for m in mods] == [True, False, False]


def test_load_mods_missing_dir(tmp_path):
    assert load_mods(tmp_path / "absent") == []


def test_save_and_load_round_trip(mods_dir):
    for folder in ("one", "two"):
        _make_mod(mods_dir, folder)
    mods = load_mods(mods_dir)
    mods.reverse()
    mods[0].active = True
    written = save_mods(mods, mods_dir)
    assert written == mods_dir / "modconfig.ini"
    reloaded = load_mods(mods_dir)
    assert [(m.folder, m.active) for m in reloaded] == [(m.folder, m.active) for m in mods]


def test_save_mods_file_format(mods_dir):
    mods = [ModInfo(folder="one", active=True), ModInfo(folder="two", active=False)]
    save_mods(mods, mods_dir)
    assert (mods_dir / "modconfig.ini").read_text() == "\n[mods]\none=true\ntwo=false\n"


def test_save_mods_missing_dir(tmp_path):
    assert save_mods([ModInfo(folder="x")], tmp_path / "absent") is None


def test_apply_active_mods_ignores_inactive():
    mods = [
        ModInfo(folder="off", use_scripts=True, redirect_save=True, save_path="mods/off/", active=False),
    ]
    assert apply_active_mods(mods) == ModSettings()


def test_apply_active_mods_combines():
    mods = [
        ModInfo(folder="a", active=True, disable_focus_pause=1, redirect_save=True, save_path="mods/a/"),
        ModInfo(folder="b", active=True, use_scripts=True, disable_focus_pause=2,
                redirect_save=True, save_path="mods/b/", disable_save_ini_override=True),
    ]
    settings = apply_active_mods(mods, False, 0)
    assert settings.force_use_scripts is True
    assert settings.disable_focus_pause == 3
    assert settings.redirect_save is True
    assert settings.save_path == "mods/b/"
    assert settings.disable_save_ini_override is True


def test_apply_active_mods_keeps_config_values():
    settings = apply_active_mods([], True, 4)
    assert settings.force_use_scripts is True
    assert settings.disable_focus_pause == 4


def _mods_for_lookup():
    return [
        ModInfo(folder="a", active=False, file_map={"data/x.bin": "a-x"}),
        ModInfo(folder="b", active=True, file_map={"data/x.bin": "b-x", "data/y.bin": "b-y"}),
        ModInfo(folder="c", active=True, file_map={"data/x.bin": "c-x", "data/z.bin": "c-z"}),
    ]


def test_find_mod_file_first_active_wins():
    mods = _mods_for_lookup()
    assert find_mod_file(mods, "Data/X.bin") == "b-x"
    assert find_mod_file(mods, "data/z.bin") == "c-z"
    assert find_mod_file(mods, "data/none.bin") is None


def test_find_mod_file_with_active_mod():
    mods = _mods_for_lookup()
    assert find_mod_file(mods, "data/x.bin", 2) == "c-x"
    assert find_mod_file(mods, "data/y.bin", 2) is None
    assert find_mod_file(mods, "data/x.bin", 0) is None


def test_get_scene_id_ignores_spaces():
    names = ["GREEN HILL 1", "GREEN HILL 2", "MARBLE 1"]
    assert get_scene_id(names, "GREENHILL2") == 1
    assert get_scene_id(names, "MARBLE 1") == 2


def test_get_scene_id_missing():
    assert get_scene_id(["ONE", "TWO"], "THREE") is None
    assert get_scene_id([], "ONE") is None