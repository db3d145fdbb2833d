"""
Tests for the error hierarchy
"""

import pytest

from bzldeps_common.errors import (
    BzlDepsError,
    EvaluationError,
    GlobError,
    ImportSpecError,
    LabelError,
    SrcsExpressionError,
    ValidationError,
)


class TestErrorCodes:
    """Each error class carries a stable code"""

    @pytest.mark.parametrize(
        "error,code",
        [
            (ValidationError("x"), "VALIDATION_ERROR"),
            (LabelError("x"), "INVALID_LABEL"),
            (SrcsExpressionError("x"), "EXPRESSION_SYNTAX_ERROR"),
            (EvaluationError("x"), "EVALUATION_ERROR"),
            (GlobError("x"), "GLOB_ERROR"),
            (ImportSpecError("x"), "IMPORT_SPEC_ERROR"),
        ],
    )
    def test_code(self, error, code):
        assert error.code == code
        assert isinstance(error, BzlDepsError)

    def test_default_code(self):
        assert BzlDepsError("x").code == "INTERNAL_ERROR"


class TestGlobError:
    """GlobError is an EvaluationError with a recognisable prefix"""

    def test_is_evaluation_error(self):
        with pytest.raises(EvaluationError):
            raise GlobError("include is not a list")

    def test_message_prefix(self):
        error = GlobError("include is not a list")
        assert error.message == "failed glob: include is not a list"
        assert str(error) == error.message


class TestSerialization:
    def test_to_dict(self):
        error = LabelError("bad label")
        assert error.to_dict() == {
            "error": "LabelError",
            "code": "INVALID_LABEL",
            "message": "bad label",
        }

    def test_repr(self):
        assert repr(ValidationError("oops")) == "ValidationError(code='VALIDATION_ERROR', message='oops')"
