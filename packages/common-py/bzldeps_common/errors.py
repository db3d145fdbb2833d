"""
bzldeps Exception Classes

This module defines the exception hierarchy for all bzldeps packages.
All custom exceptions inherit from BzlDepsError to enable consistent error handling.

Usage:
    from bzldeps_common.errors import GlobError, SrcsExpressionError

    if allow_empty is False and not result:
        raise GlobError("'allow_empty' was set and the result was empty")
"""


class BzlDepsError(Exception):
    """
    Base exception for all bzldeps errors.

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
    """

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """
        Serialize error to dictionary for reports and structured logs.

        Returns:
            dict with error details including class name, code, and message
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code='{self.code}', message='{self.message}')"


class ValidationError(BzlDepsError):
    """
    Raised when configuration or directive validation fails.

    Use this for:
    - Invalid manifest or per-package configuration
    - Malformed ``resolve`` directives
    - Unsupported manifest versions

    Example:
        if not pip_repository:
            raise ValidationError("pip_repository cannot be empty")
    """

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class LabelError(BzlDepsError):
    """Raised when a string cannot be parsed as a build label."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_LABEL")


class SrcsExpressionError(BzlDepsError):
    """
    Raised when a ``srcs`` expression is not syntactically valid.

    This is a hard error: the rule owning the expression cannot be indexed.
    """

    def __init__(self, message: str):
        super().__init__(message, code="EXPRESSION_SYNTAX_ERROR")


class EvaluationError(BzlDepsError):
    """
    Raised when a parsed ``srcs`` expression fails to evaluate.

    Use this for:
    - References to names other than ``glob``
    - Unsupported expression constructs
    - Results that are not a list of strings
    """

    def __init__(self, message: str, code: str = "EVALUATION_ERROR"):
        super().__init__(message, code=code)


class GlobError(EvaluationError):
    """
    Raised when ``glob`` is called with invalid arguments or an empty
    result violates ``allow_empty=False``.

    Inherits from EvaluationError so the srcs evaluator degrades it to an
    empty file list.
    """

    def __init__(self, message: str):
        super().__init__(f"failed glob: {message}", code="GLOB_ERROR")


class ImportSpecError(BzlDepsError):
    """Raised when a source file does not live under the given import root."""

    def __init__(self, message: str):
        super().__init__(message, code="IMPORT_SPEC_ERROR")
