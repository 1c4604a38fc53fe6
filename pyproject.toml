[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "crazyarcade"
version = "0.1.0"
description = "A terminal bomb-placing arcade game for one or two players, with a computer opponent and a leaderboard"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "arcade", "terminal", "bombs", "ai"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
crazyarcade = "crazyarcade.game:main"

[tool.hatch.build.targets.wheel]
packages = ["crazyarcade"]

[tool.pytest.ini_options]
addopts = "-ra"
