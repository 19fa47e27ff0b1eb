"""Doc comment retrieval.

Doc comments use the ``/** ... */`` convention. Ordinary ``#`` and
``/* ... */`` comments are never documentation.
"""

from nixdocgen.core.docs.format import handle_indentation, shift_headings
from nixdocgen.core.syntax import CommentTable
from nixdocgen.core.syntax.nodes import Node

# Levels 1 and 2 are taken by the category title and the binding heading
BINDING_HEADING_SHIFT = 2
ARGUMENT_HEADING_SHIFT = 1
FILE_HEADING_SHIFT = 0


def retrieve_doc_comment(
    comments: CommentTable,
    node: Node,
    shift_headings_by: int = BINDING_HEADING_SHIFT,
) -> str | None:
    """Return the normalized doc comment attached to ``node``.

    Parameters
    ----------
    comments : CommentTable
        Doc comment side table of the file ``node`` belongs to
    node : Node
        Node the comment should precede
    shift_headings_by : int
        Number of levels headings in the comment are shifted down

    Returns
    -------
    str | None
        Normalized comment, or None if there is no comment or it is blank
    """
    raw = comments.raw_doc(node)
    if raw is None:
        return None
    doc = handle_indentation(raw)
    if doc is None:
        return None
    return shift_headings(doc, shift_headings_by)
