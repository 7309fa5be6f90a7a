[build-system]
requires = ["hatchling>=1.18"]
build-backend = "hatchling.build"

[project]
name = "oslabs"
version = "0.1.0"
description = "Operating-systems lab exercises: page maps, a heap allocator, threads, synchronised queues and sockets"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating systems",
    "threads",
    "synchronisation",
    "queues",
    "sockets",
    "allocator",
    "pagemap",
    "education",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
oslabs-pagemap = "oslabs.pagemap:main"
oslabs-heap = "oslabs.heap:main"
oslabs-queue-demo = "oslabs.queue_demo:main"
oslabs-queue-stress = "oslabs.queue_stress:main"
oslabs-udp-server = "oslabs.udp_echo:server_main"
oslabs-udp-client = "oslabs.udp_echo:client_main"
oslabs-multiplexer = "oslabs.multiplexer:main"

[tool.hatch.build.targets.wheel]
packages = ["oslabs"]

[tool.hatch.build.targets.sdist]
include = ["oslabs", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
