"""
Srcs Expression Evaluation
==========================

Turns the ``srcs`` attribute of a rule into a concrete list of files.

Static lists are returned as-is. Anything else, typically ``glob(...)`` calls
combined with list arithmetic, is parsed with :mod:`ast` and run through
``ExpressionEvaluator``, a small tree-walking evaluator whose environment
only exposes ``glob``. It understands constants, list/tuple literals, ``+``
and ``*``, and calls to names bound in the environment; every other construct
is rejected.

Error policy:
    - Syntax errors raise SrcsExpressionError.
    - Evaluation errors (including glob misuse) are logged and yield ``[]``.
"""

import ast
import operator
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from bzldeps_common import EvaluationError, SrcsExpressionError
from bzldeps_common.logger import get_logger

from .globber import Globber
from .package_tree import PackagePredicate

logger = get_logger(__name__)

SrcsExpr = Union[str, List[Any], ast.expr]

_BINARY_OPERATORS: Dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Mult: operator.mul,
}

# Upper bound on the length of a list or string built with "*".
MAX_REPEAT_LENGTH = 1_000_000


def _check_repeat(left: Any, right: Any) -> None:
    if isinstance(left, int) and isinstance(right, (list, tuple, str)):
        left, right = right, left
    if isinstance(left, (list, tuple, str)) and isinstance(right, int):
        if right > 0 and len(left) * right > MAX_REPEAT_LENGTH:
            raise EvaluationError(
                f"repetition result too large: {len(left)} * {right} > {MAX_REPEAT_LENGTH}"
            )


class ExpressionEvaluator:
    """
    Sandboxed evaluator for restricted build-file expressions.

    Example:
        >>> evaluator = ExpressionEvaluator({"glob": lambda include: include})
        >>> evaluator.evaluate(ast.parse('["a.py"] + glob(["b.py"])', mode="eval"))
        ['a.py', 'b.py']
    """

    def __init__(self, env: Dict[str, Callable[..., Any]]):
        self.env = env

    def evaluate(self, node: ast.AST) -> Any:
        method = getattr(self, f"_eval_{type(node).__name__}", None)
        if method is None:
            raise EvaluationError(f"unsupported expression: {type(node).__name__}")
        return method(node)

    def _eval_Expression(self, node: ast.Expression) -> Any:
        return self.evaluate(node.body)

    def _eval_Constant(self, node: ast.Constant) -> Any:
        if isinstance(node.value, (str, int, bool)) or node.value is None:
            return node.value
        raise EvaluationError(f"unsupported constant: {node.value!r}")

    def _eval_List(self, node: ast.List) -> List[Any]:
        return [self.evaluate(element) for element in node.elts]

    def _eval_Tuple(self, node: ast.Tuple) -> tuple:
        return tuple(self.evaluate(element) for element in node.elts)

    def _eval_Name(self, node: ast.Name) -> Any:
        if node.id in self.env:
            return self.env[node.id]
        raise EvaluationError(f"undefined: {node.id}")

    def _eval_BinOp(self, node: ast.BinOp) -> Any:
        op = _BINARY_OPERATORS.get(type(node.op))
        if op is None:
            raise EvaluationError(f"unsupported operator: {type(node.op).__name__}")
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        if isinstance(left, bool) or isinstance(right, bool):
            raise EvaluationError("unsupported operand type: bool")
        if isinstance(node.op, ast.Mult):
            _check_repeat(left, right)
        try:
            return op(left, right)
        except (TypeError, ValueError, OverflowError, MemoryError) as e:
            raise EvaluationError(f"invalid operands: {e}") from e

    def _eval_Call(self, node: ast.Call) -> Any:
        func = self.evaluate(node.func)
        if not callable(func):
            raise EvaluationError("invalid call of non-function")
        args = []
        for arg in node.args:
            if isinstance(arg, ast.Starred):
                raise EvaluationError("unsupported *args in call")
            args.append(self.evaluate(arg))
        kwargs: Dict[str, Any] = {}
        for keyword in node.keywords:
            if keyword.arg is None:
                raise EvaluationError("unsupported **kwargs in call")
            if keyword.arg in kwargs:
                raise EvaluationError(f"duplicate keyword argument: {keyword.arg}")
            kwargs[keyword.arg] = self.evaluate(keyword.value)
        return func(*args, **kwargs)


def parse_srcs_expr(source: str) -> ast.Expression:
    """
    Parse ``srcs`` source text into an expression tree.

    Raises:
        SrcsExpressionError: If the text is not a valid expression
    """
    try:
        return ast.parse(source.strip(), mode="eval")
    except SyntaxError as e:
        raise SrcsExpressionError(f"failed to eval srcs expression: {e.msg} (line {e.lineno})") from e


def _static_strings(node: ast.List) -> List[str]:
    return [
        element.value
        for element in node.elts
        if isinstance(element, ast.Constant) and isinstance(element.value, str)
    ]


def evaluate_srcs(
    expr: SrcsExpr,
    repo_root: Union[str, Path],
    pkg: str,
    is_package: Optional[PackagePredicate] = None,
) -> List[str]:
    """
    Return the files a ``srcs`` attribute denotes.

    Args:
        expr: A list of strings, an ``ast`` expression, or expression source text
        repo_root: Repository root on disk
        pkg: Package the rule lives in, relative to ``repo_root``
        is_package: Optional sub-package predicate for the glob engine

    Returns:
        Source paths relative to the package; ``[]`` when evaluation fails

    Raises:
        SrcsExpressionError: If ``expr`` is source text that does not parse

    Examples:
        >>> evaluate_srcs(["main.py", "util.py"], "/repo", "app")
        ['main.py', 'util.py']
        >>> evaluate_srcs('glob(["*.py"], exclude=["*_test.py"])', "/repo", "app")
        ['main.py', 'util.py']
    """
    if isinstance(expr, list):
        return [src for src in expr if isinstance(src, str)]

    if isinstance(expr, str):
        tree = parse_srcs_expr(expr)
    elif isinstance(expr, ast.Expression):
        tree = expr
    elif isinstance(expr, ast.expr):
        tree = parse_srcs_expr(ast.unparse(expr))
    else:
        raise SrcsExpressionError(f"unsupported srcs expression type: {type(expr).__name__}")

    if isinstance(tree.body, ast.List):
        return _static_strings(tree.body)

    globber = Globber(repo_root, pkg, is_package)
    evaluator = ExpressionEvaluator({"glob": globber})
    try:
        value = evaluator.evaluate(tree)
        if not isinstance(value, list):
            raise EvaluationError(f"srcs must evaluate to a list, got {type(value).__name__}")
        for item in value:
            if not isinstance(item, str):
                raise EvaluationError(f"srcs must only contain strings, got {item!r}")
    except EvaluationError as e:
        logger.warning("failed to eval srcs expression", package=pkg, error=e.message, code=e.code)
        return []
    return value
