"""Argument names and docs of curried functions."""

from nixdocgen.core.docs.comments import ARGUMENT_HEADING_SHIFT, retrieve_doc_comment
from nixdocgen.core.docs.models import Argument, FlatArgument, PatternArgument, SingleArg
from nixdocgen.core.syntax import CommentTable
from nixdocgen.core.syntax.nodes import IdentParam, Lambda, Node, Pattern


def collect_lambda_args(lambda_: Lambda, comments: CommentTable) -> list[Argument]:
    """Collect one Argument per parameter of directly chained lambdas.

    ``a: { b, c }: d: body`` yields ``[Flat(a), Pattern([b, c]), Flat(d)]``.
    The walk stops at the first body that is not a lambda; parenthesized
    lambdas are bodies, not further parameters.
    """
    args: list[Argument] = []
    current = lambda_
    while True:
        match current.param:
            case IdentParam(name=name):
                args.append(FlatArgument.of(name, _arg_doc(comments, current.param)))
            case Pattern(entries=entries):
                args.append(
                    PatternArgument(
                        args=[SingleArg(name=e.name, doc=_arg_doc(comments, e)) for e in entries]
                    )
                )

        if not isinstance(current.body, Lambda):
            return args
        current = current.body


def _arg_doc(comments: CommentTable, node: Node) -> str:
    return retrieve_doc_comment(comments, node, ARGUMENT_HEADING_SHIFT) or ""
