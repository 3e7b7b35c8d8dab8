[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gameland"
version = "0.1.0"
description = "Terminal games: Battleship with a match server, networked Coda, a typing race lobby server and a curses launcher"
requires-python = ">=3.10"
dependencies = []
keywords = ["games", "terminal", "curses", "battleship", "coda", "typing", "multiplayer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Korean",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Games/Entertainment :: Board Games",
    "Topic :: Games/Entertainment :: Puzzle Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gameland = "gameland.launcher:main"
gameland-battleship = "gameland.battleship.client:main"
gameland-battleship-server = "gameland.battleship.server:main"
gameland-coda = "gameland.coda.client:main"
gameland-coda-server = "gameland.coda.server:main"
gameland-typing-server = "gameland.typingrace.server:main"

[tool.hatch.build.targets.wheel]
packages = ["gameland"]

[tool.pytest.ini_options]
addopts = "-ra"
