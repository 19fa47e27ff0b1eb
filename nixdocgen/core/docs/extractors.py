"""Binding resolution: which bindings of a Nix file form its documented surface.

The resolver scans the top-level expression for the first let-in or
attribute set (never entering parameter patterns) and turns documented
bindings into ``ManualEntry`` values:

- A top-level attribute set documents its own bindings.
- A let-in builds a scope from its documented bindings. Its body (or the
  binding an identifier body aliases) is scanned for an attribute set whose
  bare ``inherit`` clauses pick entries out of that scope.
- An explicit export list selects scope entries by name instead.
"""

from collections import Counter
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from nixdocgen.core.docs.arguments import collect_lambda_args
from nixdocgen.core.docs.comments import (
    BINDING_HEADING_SHIFT,
    FILE_HEADING_SHIFT,
    retrieve_doc_comment,
)
from nixdocgen.core.docs.locations import LocationIndex
from nixdocgen.core.docs.models import Argument, DocItem, ManualEntry, get_identifier
from nixdocgen.core.exceptions import AliasCycleError
from nixdocgen.core.logging import get_logger
from nixdocgen.core.syntax import SourceTree
from nixdocgen.core.syntax.nodes import (
    AttrSet,
    Binding,
    Expr,
    Ident,
    Inherit,
    Lambda,
    LetIn,
    preorder,
)

logger = get_logger(__name__)

Scope = Mapping[str, ManualEntry]

_EMPTY_SCOPE: Scope = MappingProxyType({})


class DocExtractor:
    """Extract the ordered documentation entries of one parsed Nix file.

    An extractor is bound to a single ``SourceTree``; every scope it builds
    lives only for one call of ``collect_entries``.

    Parameters
    ----------
    tree : SourceTree
        Parsed file with its doc comment table
    prefix : str
        Identifier prefix, e.g. "lib"
    category : str
        Function category, e.g. "strings"
    locations : LocationIndex | None
        Location index used to fill ``ManualEntry.location``
    """

    def __init__(
        self,
        tree: SourceTree,
        prefix: str = "lib",
        category: str = "",
        locations: LocationIndex | None = None,
    ) -> None:
        self.tree = tree
        self.prefix = prefix
        self.category = category
        self.locations = locations if locations is not None else LocationIndex()

    def collect_entries(self, export: Sequence[str] | None = None) -> list[ManualEntry]:
        """Resolve the documented bindings of the file.

        Parameters
        ----------
        export : Sequence[str] | None
            Explicit names to document from the first let block, in order.
            Names missing from the let block are skipped.

        Returns
        -------
        list[ManualEntry]
            Entries in source order, or in ``export`` order when given

        Raises
        ------
        AliasCycleError
            If the let body aliases identifiers in a cycle
        """
        root = self.tree.expression
        if root is None:
            return []

        for node in preorder(root, skip_patterns=True):
            match node:
                case LetIn():
                    return self._collect_let_in(node, export)
                case AttrSet():
                    if export is not None:
                        logger.warning(
                            "Export list ignored: file has no let block before its attribute set"
                        )
                    logger.debug("Documenting top-level attribute set")
                    return self.collect_bindings(node, _EMPTY_SCOPE)

        logger.debug("No attribute set or let block found")
        return []

    def collect_bindings(self, node: Expr, scope: Scope) -> list[ManualEntry]:
        """Document the first attribute set found in ``node``.

        Documented bindings become entries; bare ``inherit`` names are looked
        up in ``scope``. ``inherit (source) ...`` never resolves.
        """
        attrset = next(
            (n for n in preorder(node, skip_patterns=True) if isinstance(n, AttrSet)),
            None,
        )
        if attrset is None:
            return []

        entries: list[ManualEntry] = []
        for entry in attrset.entries:
            match entry:
                case Binding():
                    if (manual_entry := self.collect_entry(entry)) is not None:
                        entries.append(manual_entry)
                case Inherit(source=None, attrs=attrs):
                    entries.extend(scope[name] for name in attrs if name in scope)
                case Inherit():
                    continue

        _warn_on_collisions(entries)
        return entries

    def collect_entry(self, binding: Binding) -> ManualEntry | None:
        """Turn a binding into an entry if it carries a doc comment."""
        item = self.retrieve_doc_item(binding)
        return self.to_entry(item) if item is not None else None

    def retrieve_doc_item(self, binding: Binding) -> DocItem | None:
        """Build a DocItem from a documented binding.

        Arguments are collected when the bound value is a lambda.
        """
        doc = retrieve_doc_comment(self.tree.comments, binding, BINDING_HEADING_SHIFT)
        if doc is None:
            return None

        args: list[Argument] = []
        if isinstance(binding.value, Lambda):
            args = collect_lambda_args(binding.value, self.tree.comments)
        return DocItem(name=binding.attrpath, comment=doc, args=args)

    def to_entry(self, item: DocItem) -> ManualEntry:
        ident = get_identifier(self.prefix, self.category, item.name)
        return ManualEntry(
            prefix=self.prefix,
            category=self.category,
            location=self.locations.get(ident),
            name=item.name,
            description=item.comment.split("\n\n"),
            args=item.args,
        )

    def build_scope(self, let_in: LetIn) -> Scope:
        """Map names of the documented let bindings to their entries.

        A later binding with the same name replaces an earlier one.
        """
        scope: dict[str, ManualEntry] = {}
        for entry in let_in.entries:
            if isinstance(entry, Binding) and (item := self.retrieve_doc_item(entry)) is not None:
                scope[item.name] = self.to_entry(item)
        return MappingProxyType(scope)

    def resolve_let_ident(self, let_in: LetIn, name: str) -> Expr | None:
        """Follow identifier aliases through the bindings of ``let_in``.

        Returns the first bound value that is not an identifier, or None when
        a name in the chain is not bound by the let block.

        Raises
        ------
        AliasCycleError
            If the chain returns to a name it already visited
        """
        chain = [name]
        while True:
            binding = let_in.find_binding(name)
            if binding is None:
                return None
            if not isinstance(binding.value, Ident):
                return binding.value

            name = binding.value.name
            if name in chain:
                raise AliasCycleError([*chain, name])
            chain.append(name)

    def extract_file_doc(self) -> str | None:
        """Return the doc comment preceding the top-level expression."""
        if self.tree.expression is None:
            return None
        return retrieve_doc_comment(self.tree.comments, self.tree.expression, FILE_HEADING_SHIFT)

    def _collect_let_in(self, let_in: LetIn, export: Sequence[str] | None) -> list[ManualEntry]:
        scope = self.build_scope(let_in)
        logger.debug("Let block scope has {count} documented binding(s)", count=len(scope))

        if export is not None:
            return [scope[name] for name in export if name in scope]

        body = let_in.body
        if isinstance(body, Ident):
            resolved = self.resolve_let_ident(let_in, body.name)
            if resolved is None:
                logger.debug("Let body '{name}' is not bound by the let block", name=body.name)
                return []
            body = resolved

        return self.collect_bindings(body, scope)


def _warn_on_collisions(entries: list[ManualEntry]) -> None:
    counts = Counter(entry.identifier for entry in entries)
    for ident, count in counts.items():
        if count > 1:
            logger.warning(
                "{ident} is documented {count} times; anchors will collide",
                ident=ident,
                count=count,
            )
