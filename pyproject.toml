[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "platypus"
version = "0.1.0"
description = "A side-scrolling mining and combat game with procedural terrain, field of view and orc enemies"
requires-python = ">=3.10"
keywords = ["game", "2d", "platformer", "procedural", "terrain", "pygame", "shadow-casting"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
platypus = "platypus.game:main"

[tool.hatch.build.targets.wheel]
packages = ["platypus"]

[tool.pytest.ini_options]
addopts = "-ra"
