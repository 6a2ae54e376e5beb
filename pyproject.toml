[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "retrokit"
version = "0.1.0"
description = "Building blocks of a retro 2D game engine: INI settings, trig tables, encrypted data packs, input, palettes, players, objects and mods"
requires-python = ">=3.10"
dependencies = []
keywords = ["retro", "game engine", "ini", "palette", "data pack", "mods", "fixed point"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Typing :: Typed",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["retrokit"]

[tool.pytest.ini_options]
addopts = "-ra"
