"""Restricted expression interpreter for extractor and scorer text.

Expressions are parsed once with :func:`ast.parse` and then interpreted by
walking the tree; nothing is handed to ``eval``/``exec``. Only a subset of
Python's expression grammar is accepted:

  - Literals and list / tuple / set / dict displays
  - Names, attribute access and subscripts (``_.price``, ``_['tags'][0]``)
  - Arithmetic: +, -, *, /, //, %, ** and unary -, +
  - Comparisons (chainable): ==, !=, <, <=, >, >=, in, not in, is, is not
  - Boolean: and, or, not (``&&`` and ``||`` are accepted as aliases)
  - Conditional expressions: ``a if cond else b``
  - Calls to callables reachable from the scope

Lambdas, comprehensions, assignment expressions, f-strings, star-args and any
attribute whose name starts with an underscore are rejected at compile time.

Free names resolve against the expression's parameters first, then the
caller's namespace (mapping keys, or attributes of a plain object), then a
fixed table of safe helpers. Attribute access on a mapping reads its key.
Reading a missing key, index or attribute of a present value (or indexing a
value that does not support it) yields None; reading anything from None
raises TypeError.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Dict, Optional, Sequence, Tuple
import ast
import io
import math
import operator
import tokenize

from rapidfuzz import fuzz

from ..errors import ExpressionError
from ..utils.normalization import normalize_token


def _ratio(left: Any, right: Any) -> float:
    """rapidfuzz ratio scaled to [0, 1]."""
    return fuzz.ratio(str(left), str(right)) / 100.0


def _token_set_ratio(left: Any, right: Any) -> float:
    """rapidfuzz token_set_ratio scaled to [0, 1]."""
    return fuzz.token_set_ratio(str(left), str(right)) / 100.0


SAFE_BUILTINS: Dict[str, Any] = {
    "abs": abs,
    "min": min,
    "max": max,
    "round": round,
    "len": len,
    "sum": sum,
    "any": any,
    "all": all,
    "sorted": sorted,
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "list": list,
    "tuple": tuple,
    "set": set,
    "exp": math.exp,
    "sqrt": math.sqrt,
    "floor": math.floor,
    "ceil": math.ceil,
    "log": math.log,
    "normalize": normalize_token,
    "ratio": _ratio,
    "token_set_ratio": _token_set_ratio,
}

# str.format can reach dunder attributes through its field syntax.
_BLOCKED_ATTRIBUTES = frozenset({"format", "format_map", "mro"})

_BIN_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPS = {
    ast.USub: operator.neg,
    ast.UAdd: operator.pos,
    ast.Not: operator.not_,
}

_COMPARE_OPS = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.In: lambda a, b: a in b,
    ast.NotIn: lambda a, b: a not in b,
    ast.Is: operator.is_,
    ast.IsNot: operator.is_not,
}

_ALLOWED_NODES = frozenset({
    # structural
    ast.Expression,
    ast.Load,
    # literals and displays
    ast.Constant,
    ast.List,
    ast.Tuple,
    ast.Set,
    ast.Dict,
    # lookups
    ast.Name,
    ast.Attribute,
    ast.Subscript,
    ast.Slice,
    # operations
    ast.BinOp,
    ast.UnaryOp,
    ast.BoolOp,
    ast.Compare,
    ast.IfExp,
    ast.Call,
    ast.keyword,
    ast.And,
    ast.Or,
    *_BIN_OPS,
    *_UNARY_OPS,
    *_COMPARE_OPS,
})


_LOGICAL_ALIASES = {"&": "and", "|": "or"}


def _prepare(source: str) -> str:
    """Rewrite ``&&`` / ``||`` operator tokens to ``and`` / ``or``.

    Only operator tokens are touched; string literals keep their text.
    """
    source = source.strip()
    if "&&" not in source and "||" not in source:
        return source
    try:
        tokens = list(tokenize.generate_tokens(io.StringIO(source).readline))
    except (tokenize.TokenError, SyntaxError):
        # ast.parse reports the error
        return source
    line_starts = [0]
    for line in source.splitlines(keepends=True):
        line_starts.append(line_starts[-1] + len(line))
    offsets = []
    previous = None
    for first, second in zip(tokens, tokens[1:]):
        if first is previous:
            continue
        if (first.type == tokenize.OP and first.string in _LOGICAL_ALIASES
                and second.type == tokenize.OP and second.string == first.string
                and second.start == first.end):
            offsets.append((line_starts[first.start[0] - 1] + first.start[1], _LOGICAL_ALIASES[first.string]))
            previous = second
    for offset, word in reversed(offsets):
        source = f"{source[:offset]} {word} {source[offset + 2:]}"
    return source.strip()


def validate_tree(tree: ast.AST, source: str) -> None:
    """Reject any construct outside the supported grammar.

    Raises:
        ExpressionError: On the first disallowed node
    """
    for node in ast.walk(tree):
        if type(node) not in _ALLOWED_NODES:
            raise ExpressionError(f"disallowed construct {type(node).__name__}", source)
        if isinstance(node, ast.Attribute):
            if node.attr.startswith("_") or node.attr in _BLOCKED_ATTRIBUTES:
                raise ExpressionError(f"access to attribute '{node.attr}' is not allowed", source)
        elif isinstance(node, ast.Name) and node.id.startswith("__"):
            raise ExpressionError(f"name '{node.id}' is not allowed", source)
        elif isinstance(node, ast.Call):
            if any(isinstance(arg, ast.Starred) for arg in node.args):
                raise ExpressionError("star-arguments are not allowed", source)
            if any(kw.arg is None for kw in node.keywords):
                raise ExpressionError("keyword unpacking is not allowed", source)
        elif isinstance(node, ast.Dict) and any(key is None for key in node.keys):
            raise ExpressionError("dict unpacking is not allowed", source)


class _Evaluator(ast.NodeVisitor):
    """Walks a validated expression tree against one evaluation scope."""

    def __init__(self, source: str, args: Dict[str, Any], namespace: Any, helpers: Mapping):
        self.source = source
        self.args = args
        self.namespace = namespace
        self.helpers = helpers

    def visit(self, node: ast.AST) -> Any:
        visitor = getattr(self, "visit_" + node.__class__.__name__, None)
        if visitor is None:
            raise ExpressionError(f"unsupported expression element '{node.__class__.__name__}'", self.source)
        return visitor(node)

    def visit_Expression(self, node: ast.Expression) -> Any:
        return self.visit(node.body)

    def visit_Constant(self, node: ast.Constant) -> Any:
        return node.value

    def visit_Name(self, node: ast.Name) -> Any:
        ident = node.id
        if ident in self.args:
            return self.args[ident]
        namespace = self.namespace
        if isinstance(namespace, Mapping):
            if ident in namespace:
                return namespace[ident]
        elif namespace is not None and not ident.startswith("_") and hasattr(namespace, ident):
            return getattr(namespace, ident)
        if ident in self.helpers:
            return self.helpers[ident]
        raise ExpressionError(f"unknown name '{ident}'", self.source)

    def visit_Attribute(self, node: ast.Attribute) -> Any:
        value = self.visit(node.value)
        if value is None:
            raise TypeError(f"Cannot read attribute '{node.attr}' of None")
        if isinstance(value, Mapping):
            return value.get(node.attr)
        return getattr(value, node.attr, None)

    def visit_Subscript(self, node: ast.Subscript) -> Any:
        value = self.visit(node.value)
        if value is None:
            raise TypeError("Cannot subscript None")
        index = self.visit(node.slice)
        try:
            return value[index]
        except (KeyError, IndexError, TypeError):
            return None

    def visit_Slice(self, node: ast.Slice) -> slice:
        lower = self.visit(node.lower) if node.lower is not None else None
        upper = self.visit(node.upper) if node.upper is not None else None
        step = self.visit(node.step) if node.step is not None else None
        return slice(lower, upper, step)

    def visit_List(self, node: ast.List) -> list:
        return [self.visit(elt) for elt in node.elts]

    def visit_Tuple(self, node: ast.Tuple) -> tuple:
        return tuple(self.visit(elt) for elt in node.elts)

    def visit_Set(self, node: ast.Set) -> set:
        return {self.visit(elt) for elt in node.elts}

    def visit_Dict(self, node: ast.Dict) -> dict:
        return {self.visit(k): self.visit(v) for k, v in zip(node.keys, node.values)}

    def visit_BinOp(self, node: ast.BinOp) -> Any:
        return _BIN_OPS[type(node.op)](self.visit(node.left), self.visit(node.right))

    def visit_UnaryOp(self, node: ast.UnaryOp) -> Any:
        return _UNARY_OPS[type(node.op)](self.visit(node.operand))

    def visit_BoolOp(self, node: ast.BoolOp) -> Any:
        result: Any = None
        if isinstance(node.op, ast.And):
            for value in node.values:
                result = self.visit(value)
                if not result:
                    return result
            return result
        for value in node.values:
            result = self.visit(value)
            if result:
                return result
        return result

    def visit_Compare(self, node: ast.Compare) -> bool:
        left = self.visit(node.left)
        for op, comparator in zip(node.ops, node.comparators):
            right = self.visit(comparator)
            if not _COMPARE_OPS[type(op)](left, right):
                return False
            left = right
        return True

    def visit_IfExp(self, node: ast.IfExp) -> Any:
        if self.visit(node.test):
            return self.visit(node.body)
        return self.visit(node.orelse)

    def visit_Call(self, node: ast.Call) -> Any:
        func = self.visit(node.func)
        if not callable(func):
            raise ExpressionError(f"'{ast.unparse(node.func)}' is not callable", self.source)
        args = [self.visit(arg) for arg in node.args]
        kwargs = {kw.arg: self.visit(kw.value) for kw in node.keywords}
        return func(*args, **kwargs)


class Expression:
    """A compiled expression, callable as ``expr(namespace, *args)``.

    Positional arguments bind to ``params`` in order; missing ones are None.
    Immutable after construction and safe to reuse across evaluations.
    """

    __slots__ = ("source", "params", "helpers", "_tree")

    def __init__(self, source: str, params: Tuple[str, ...], tree: ast.Expression, helpers: Mapping):
        self.source = source
        self.params = params
        self.helpers = helpers
        self._tree = tree

    def __call__(self, namespace: Any, *args: Any) -> Any:
        bound = {name: (args[i] if i < len(args) else None) for i, name in enumerate(self.params)}
        return _Evaluator(self.source, bound, namespace, self.helpers).visit(self._tree)

    def __repr__(self) -> str:
        return f"Expression(({', '.join(self.params)}) -> {self.source!r})"


def compile_expression(source: str, params: Sequence[str] = ("_",),
                       helpers: Optional[Mapping] = None) -> Expression:
    """Parse and validate ``source`` into a reusable :class:`Expression`.

    Args:
        source: Expression text
        params: Names bound to the positional arguments at call time
        helpers: Extra callables/values layered over :data:`SAFE_BUILTINS`

    Raises:
        ExpressionError: If the text is not a valid, supported expression
    """
    if not isinstance(source, str):
        raise ExpressionError(f"expression must be a string, got {type(source).__name__}")
    prepared = _prepare(source)
    try:
        tree = ast.parse(prepared, mode="eval")
    except SyntaxError as e:
        raise ExpressionError(f"invalid syntax: {e.msg}", source) from None
    validate_tree(tree, source)
    table = dict(SAFE_BUILTINS)
    if helpers:
        table.update(helpers)
    return Expression(source, tuple(params), tree, table)


__all__ = ["Expression", "compile_expression", "validate_tree", "SAFE_BUILTINS"]
