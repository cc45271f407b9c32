[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "soulcast"
version = "0.1.0"
description = "A small retro-style 2D game engine with a palette-based software renderer and a 4-bit PCM sound chip"
requires-python = ">=3.10"
keywords = ["game engine", "retro", "palette", "pixel art", "pcm", "sound chip"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]
dependencies = [
    "pygame",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
soulcast = "soulcast.engine:main"

[tool.hatch.build.targets.wheel]
packages = ["soulcast"]

[tool.pytest.ini_options]
addopts = "-ra"
