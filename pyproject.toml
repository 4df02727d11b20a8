[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "haarp"
version = "0.1.0"
description = "Caching-proxy helpers: URL matching plugins, byte-interval bookkeeping, socket handling and small utilities"
requires-python = ">=3.10"
dependencies = []
keywords = ["proxy", "cache", "http", "plugins", "url-matching"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Proxy Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
haarp-plugin = "haarp.plugins.registry:main"

[tool.hatch.build.targets.wheel]
packages = ["haarp"]

[tool.pytest.ini_options]
addopts = "-ra"
