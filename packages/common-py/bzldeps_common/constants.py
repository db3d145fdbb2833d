"""
bzldeps Constants

Shared constants used across the schema, sdk and cli packages.
"""

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_LEVEL_ENV_VAR = "BZLDEPS_LOG_LEVEL"

# Label of a dependency whose provenance should be logged on every resolution.
EXPLAIN_DEPENDENCY_ENV_VAR = "EXPLAIN_DEPENDENCY"

SUPPORTED_MANIFEST_VERSIONS = ["1"]


class PythonDefaults:
    """Defaults for the Python language extension."""

    LANGUAGE_NAME = "py"
    SOURCE_EXTENSION = ".py"
    LIBRARY_ENTRYPOINT_FILENAME = "__init__.py"
    PIP_REPOSITORY = "pip"
    DISTRIBUTION_PREFIX = "pypi__"
    BUILD_FILE_NAMES = ("BUILD.bazel", "BUILD")


class DirectiveNames:
    """Build-file comment directives understood by bzldeps."""

    PREFIX = "gazelle:"
    RESOLVE = "resolve"
    IGNORE = "ignore"
