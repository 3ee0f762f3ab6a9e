import ast
import logging

from checkform.errors import MalformedCheckError
from checkform.parser import parse_check

logger = logging.getLogger(__name__)


class AssertThatTransformer(ast.NodeTransformer):
    """Expand ``assert_that`` calls ahead of time.

    Every call of the form ``assert_that(<subject>, "<check>")`` with a literal
    check string is replaced by::

        _checkform_run_check(<subject>, "<check>", "<subject source>", (<expr>, ...))

    where the tuple holds the expressions written inside the check, parsed as
    ordinary Python so they are evaluated once, in the caller's own scope.
    A malformed check string is reported as a ``SyntaxError`` while the module
    is being rewritten, before any of its code runs.

    Calls whose check is not a string literal are left as they are and go
    through the runtime path of ``checkform.dispatch.assert_that``.
    """

    FUNCTION_NAME = "assert_that"
    RUN_CHECK_NAME = "_checkform_run_check"

    def __init__(self, source: str | None = None, filename: str = "<unknown>") -> None:
        self.source = source
        self.filename = filename
        self.rewritten = 0

    def visit_Module(self, node: ast.Module):
        self.generic_visit(node)
        if self.rewritten:
            self._inject_run_check(node)
        logger.debug("Rewrote %d assert_that call(s) in %s", self.rewritten, self.filename)
        return node

    def visit_Call(self, node: ast.Call):
        self.generic_visit(node)
        if not self._is_assert_that(node):
            return node

        subject, check_node = node.args
        check = check_node.value
        try:
            form = parse_check(check)
        except MalformedCheckError as e:
            raise SyntaxError(
                str(e),
                (self.filename, node.lineno, node.col_offset + 1, self._segment(node)),
            ) from e

        values = [self._relocate(expr.copy_node(), node) for expr in form.expressions]
        expanded = ast.Call(
            func=ast.Name(id=self.RUN_CHECK_NAME, ctx=ast.Load()),
            args=[
                subject,
                ast.Constant(value=check),
                ast.Constant(value=self._segment(subject)),
                ast.Tuple(elts=values, ctx=ast.Load()),
            ],
            keywords=[],
        )
        self.rewritten += 1
        return ast.copy_location(expanded, node)

    def _is_assert_that(self, node: ast.Call) -> bool:
        match node.func:
            case ast.Name(id=name) | ast.Attribute(attr=name):
                if name != self.FUNCTION_NAME:
                    return False
            case _:
                return False
        if len(node.args) != 2 or node.keywords:
            return False
        if any(isinstance(arg, ast.Starred) for arg in node.args):
            return False
        check = node.args[1]
        return isinstance(check, ast.Constant) and isinstance(check.value, str)

    def _segment(self, expr: ast.expr) -> str:
        if self.source is not None:
            segment = ast.get_source_segment(self.source, expr)
            if isinstance(segment, str) and segment:
                return segment.strip()
        return ast.unparse(expr)

    @staticmethod
    def _relocate(expr: ast.expr, anchor: ast.AST) -> ast.expr:
        # Expressions parsed from the check string point at the call itself.
        for child in ast.walk(expr):
            ast.copy_location(child, anchor)
        return expr

    def _inject_run_check(self, node: ast.Module) -> None:
        stmt = ast.ImportFrom(
            module="checkform.dispatch",
            names=[ast.alias(name="run_check", asname=self.RUN_CHECK_NAME)],
            level=0,
        )
        insert_at = 1 if ast.get_docstring(node, clean=False) is not None else 0
        while (
            insert_at < len(node.body)
            and isinstance(node.body[insert_at], ast.ImportFrom)
            and node.body[insert_at].module == "__future__"
        ):
            insert_at += 1
        node.body.insert(insert_at, stmt)


def rewrite_source(source: str, filename: str = "<unknown>") -> ast.Module:
    """Parse ``source`` and expand its ``assert_that`` calls."""
    tree = ast.parse(source, filename=filename)
    tree = AssertThatTransformer(source, filename).visit(tree)
    return ast.fix_missing_locations(tree)
