[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ariafetch"
version = "0.1.0"
description = "Download files by driving a bundled aria2c daemon over JSON-RPC"
requires-python = ">=3.10"
dependencies = []
keywords = ["aria2", "aria2c", "download", "json-rpc", "downloader"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: MacOS",
    "Operating System :: Microsoft :: Windows",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ariafetch = "ariafetch.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ariafetch"]

[tool.pytest.ini_options]
addopts = "-ra"
