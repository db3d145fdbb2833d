"""
bzldeps common - shared errors, constants and logging.
"""

from .constants import (
    EXPLAIN_DEPENDENCY_ENV_VAR,
    LOG_LEVEL_ENV_VAR,
    LOG_LEVELS,
    SUPPORTED_MANIFEST_VERSIONS,
    DirectiveNames,
    PythonDefaults,
)
from .errors import (
    BzlDepsError,
    EvaluationError,
    GlobError,
    ImportSpecError,
    LabelError,
    SrcsExpressionError,
    ValidationError,
)

__all__ = [
    # Errors
    "BzlDepsError",
    "ValidationError",
    "LabelError",
    "SrcsExpressionError",
    "EvaluationError",
    "GlobError",
    "ImportSpecError",
    # Constants
    "LOG_LEVELS",
    "LOG_LEVEL_ENV_VAR",
    "EXPLAIN_DEPENDENCY_ENV_VAR",
    "SUPPORTED_MANIFEST_VERSIONS",
    "PythonDefaults",
    "DirectiveNames",
]
