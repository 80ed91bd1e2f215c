[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "boycolor"
version = "0.1.0"
description = "Game Boy (Sharp LR35902) CPU core with emulator display and keyboard configuration helpers"
requires-python = ">=3.11"
dependencies = []
keywords = ["game boy", "emulator", "lr35902", "cpu", "joypad"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["boycolor"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
