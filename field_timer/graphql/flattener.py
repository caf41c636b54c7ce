"""
Query flattening.

This module splits a composite GraphQL document into standalone leaf queries,
one per terminal field, preserving the path of fields, fragments and inline
fragments that leads to it. Fragment spreads are inlined at every spread site.

Examples:
    ```python
    queries = flatten_source("query { user { name age } }")
    # ['{\\n  user {\\n    name\\n  }\\n}', '{\\n  user {\\n    age\\n  }\\n}']
    ```
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence, Set, Tuple, Union

from graphql import GraphQLSyntaxError, parse, print_ast
from graphql.language import (
    ArgumentNode,
    DirectiveNode,
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    OperationDefinitionNode,
    OperationType,
    SelectionSetNode,
    VariableDefinitionNode,
    VariableNode,
    Visitor,
    visit,
)

from ..exceptions import (
    DocumentParseError,
    DuplicateFragmentError,
    FragmentCycleError,
    FragmentNotFoundError,
    SerializationError,
)

logger = logging.getLogger(__name__)

# Rendered segments from the operation header down to the current selection.
Path = Tuple[str, ...]


def parse_document(source: Union[str, bytes]) -> DocumentNode:
    """
    Parse a GraphQL document.

    Args:
        source: Document text, or raw UTF-8 bytes as read from a file or stdin

    Returns:
        Parsed DocumentNode

    Raises:
        DocumentParseError: If the bytes are not UTF-8 or the text is not valid GraphQL
    """
    if isinstance(source, bytes):
        try:
            source = source.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DocumentParseError(f"Document is not valid UTF-8: {e}")

    try:
        return parse(source, no_location=True)
    except GraphQLSyntaxError as e:
        location = e.locations[0] if e.locations else None
        raise DocumentParseError(
            f"Invalid GraphQL document: {e.message}",
            line=location.line if location else None,
            column=location.column if location else None,
        )


def render_arguments(arguments: Sequence[ArgumentNode]) -> str:
    """Render ``(name: value, ...)``, or nothing for an empty list."""
    if not arguments:
        return ""
    return "({})".format(
        ", ".join(f"{arg.name.value}: {print_ast(arg.value)}" for arg in arguments)
    )


def render_directives(directives: Iterable[DirectiveNode]) -> str:
    return " ".join(print_ast(directive) for directive in directives or ())


def render_variable_definitions(definitions: Sequence[VariableDefinitionNode]) -> str:
    return ", ".join(print_ast(definition) for definition in definitions or ())


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


class _VariableCollector(Visitor):
    """Collect the names of all variables referenced under a node."""

    def __init__(self) -> None:
        super().__init__()
        self.names: Set[str] = set()

    def enter_variable(self, node: VariableNode, *_args: object) -> None:
        self.names.add(node.name.value)


def prune_unused_variables(document: DocumentNode) -> DocumentNode:
    """
    Drop variable definitions that no selection or directive refers to.

    Args:
        document: A parsed single-operation document

    Returns:
        A new document whose operations only declare the variables they use
    """
    definitions = []
    for definition in document.definitions:
        if not isinstance(definition, OperationDefinitionNode):
            definitions.append(definition)
            continue

        collector = _VariableCollector()
        visit(definition.selection_set, collector)
        for directive in definition.directives or ():
            visit(directive, collector)

        definitions.append(
            OperationDefinitionNode(
                operation=definition.operation,
                name=definition.name,
                variable_definitions=tuple(
                    var_def
                    for var_def in definition.variable_definitions or ()
                    if var_def.variable.name.value in collector.names
                ),
                directives=definition.directives,
                selection_set=definition.selection_set,
            )
        )
    return DocumentNode(definitions=tuple(definitions))


class QueryFlattener:
    """
    Splits a document into one standalone query per terminal field.

    The fragment table is built once and never mutated. Each branch of the
    walk gets its own path tuple, so siblings never see each other's segments.

    Args:
        document: Parsed composite query document
        prune_variables: Drop variable definitions a leaf query does not use
    """

    def __init__(self, document: DocumentNode, prune_variables: bool = False):
        self.document = document
        self.prune_variables = prune_variables
        self.fragments = self._build_fragment_table(document)

    @staticmethod
    def _build_fragment_table(
        document: DocumentNode,
    ) -> Dict[str, FragmentDefinitionNode]:
        fragments: Dict[str, FragmentDefinitionNode] = {}
        for definition in document.definitions:
            if isinstance(definition, FragmentDefinitionNode):
                name = definition.name.value
                if name in fragments:
                    raise DuplicateFragmentError(name)
                fragments[name] = definition
        return fragments

    def flatten(self) -> List[str]:
        """
        Flatten every query operation of the document.

        Returns:
            Standalone query strings in depth-first, left-to-right order

        Raises:
            FragmentNotFoundError: A spread names an undefined fragment
            FragmentCycleError: A fragment spreads itself
            SerializationError: A reconstructed query failed to re-parse
        """
        queries: List[str] = []
        for definition in self.document.definitions:
            if not isinstance(definition, OperationDefinitionNode):
                continue
            if definition.operation != OperationType.QUERY:
                logger.debug(
                    "Skipping %s operation %s",
                    definition.operation.value,
                    definition.name.value if definition.name else "<anonymous>",
                )
                continue
            self._handle_operation(definition, queries)

        logger.info("Flattened document into %d leaf queries", len(queries))
        return queries

    def _handle_operation(
        self, operation: OperationDefinitionNode, queries: List[str]
    ) -> None:
        name = operation.name.value if operation.name else ""
        variables = render_variable_definitions(operation.variable_definitions)
        header = _join(
            "query",
            name + (f"({variables})" if variables else ""),
            render_directives(operation.directives),
        )
        self._handle_selection_set((header,), operation.selection_set, queries, ())

    def _handle_selection_set(
        self,
        path: Path,
        selection_set: SelectionSetNode,
        queries: List[str],
        active_fragments: Tuple[str, ...],
    ) -> None:
        if selection_set is None:
            return

        for selection in selection_set.selections:
            if isinstance(selection, FieldNode):
                self._handle_field(path, selection, queries, active_fragments)
            elif isinstance(selection, FragmentSpreadNode):
                self._handle_fragment_spread(path, selection, queries, active_fragments)
            elif isinstance(selection, InlineFragmentNode):
                self._handle_inline_fragment(path, selection, queries, active_fragments)

    def _handle_field(
        self,
        path: Path,
        field: FieldNode,
        queries: List[str],
        active_fragments: Tuple[str, ...],
    ) -> None:
        alias = f"{field.alias.value}: " if field.alias else ""
        path = path + (
            _join(
                alias + field.name.value + render_arguments(field.arguments),
                render_directives(field.directives),
            ),
        )

        if field.selection_set is None or not field.selection_set.selections:
            queries.append(self._path_to_query(path))
        else:
            self._handle_selection_set(path, field.selection_set, queries, active_fragments)

    def _handle_fragment_spread(
        self,
        path: Path,
        spread: FragmentSpreadNode,
        queries: List[str],
        active_fragments: Tuple[str, ...],
    ) -> None:
        name = spread.name.value
        fragment = self.fragments.get(name)
        if fragment is None:
            raise FragmentNotFoundError(name)
        if name in active_fragments:
            raise FragmentCycleError(active_fragments + (name,))

        path = path + (
            _join(
                "...",
                f"on {fragment.type_condition.name.value}",
                render_directives(spread.directives),
                render_directives(fragment.directives),
            ),
        )
        self._handle_selection_set(
            path, fragment.selection_set, queries, active_fragments + (name,)
        )

    def _handle_inline_fragment(
        self,
        path: Path,
        fragment: InlineFragmentNode,
        queries: List[str],
        active_fragments: Tuple[str, ...],
    ) -> None:
        type_condition = (
            f"on {fragment.type_condition.name.value}" if fragment.type_condition else ""
        )
        path = path + (
            _join("...", type_condition, render_directives(fragment.directives)),
        )
        self._handle_selection_set(path, fragment.selection_set, queries, active_fragments)

    def _path_to_query(self, path: Path) -> str:
        text = " { ".join(path) + " }" * (len(path) - 1)
        try:
            document = parse(text, no_location=True)
        except GraphQLSyntaxError as e:
            raise SerializationError(
                f"Reconstructed query does not parse: {e.message}", query_text=text
            )

        if self.prune_variables:
            document = prune_unused_variables(document)
        return print_ast(document)


def flatten(document: DocumentNode, prune_variables: bool = False) -> List[str]:
    """Flatten a parsed document into standalone leaf queries."""
    return QueryFlattener(document, prune_variables=prune_variables).flatten()


def flatten_source(source: Union[str, bytes], prune_variables: bool = False) -> List[str]:
    """Parse and flatten a document in one step."""
    return flatten(parse_document(source), prune_variables=prune_variables)
