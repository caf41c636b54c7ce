"""
Tests for query flattening.
"""

import pytest
from graphql import parse, print_ast
from graphql.language import FieldNode, OperationDefinitionNode

from field_timer.exceptions import (
    DocumentParseError,
    DuplicateFragmentError,
    FragmentCycleError,
    FragmentNotFoundError,
    SerializationError,
)
from field_timer.graphql.flattener import (
    QueryFlattener,
    flatten,
    flatten_source,
    parse_document,
    prune_unused_variables,
    render_arguments,
    render_directives,
)


def canonical(query: str) -> str:
    """Re-print a query the way the flattener does."""
    return print_ast(parse(query, no_location=True))


def leaf_path(query: str) -> list:
    """Walk a single-branch query and return the field names along it."""
    document = parse(query)
    operation = document.definitions[0]
    assert isinstance(operation, OperationDefinitionNode)

    names = []
    selection_set = operation.selection_set
    while selection_set is not None:
        assert len(selection_set.selections) == 1
        selection = selection_set.selections[0]
        if isinstance(selection, FieldNode):
            names.append(selection.name.value)
        selection_set = selection.selection_set
    return names


def count_leaves(selection_set) -> int:
    total = 0
    for selection in selection_set.selections:
        if selection.selection_set is None:
            total += 1
        else:
            total += count_leaves(selection.selection_set)
    return total


class TestParseDocument:
    """Test document parsing."""

    def test_parse_text(self):
        document = parse_document("{ user { name } }")
        assert len(document.definitions) == 1

    def test_parse_bytes(self):
        document = parse_document(b"query { user { name } }")
        assert len(document.definitions) == 1

    def test_invalid_utf8(self):
        with pytest.raises(DocumentParseError):
            parse_document(b"\xff\xfe{ user }")

    def test_syntax_error_has_location(self):
        with pytest.raises(DocumentParseError) as exc_info:
            parse_document("query {\n  user {\n")

        assert exc_info.value.line is not None
        assert "Invalid GraphQL document" in str(exc_info.value)


class TestRendering:
    """Test segment rendering helpers."""

    def test_render_arguments(self):
        field = parse('{ user(id: 1, name: "x", tags: [A, B]) }').definitions[0]
        arguments = field.selection_set.selections[0].arguments

        assert render_arguments(arguments) == '(id: 1, name: "x", tags: [A, B])'

    def test_render_no_arguments(self):
        assert render_arguments(()) == ""

    def test_render_directives(self):
        field = parse("{ user @include(if: $a) @skip(if: false) }").definitions[0]
        directives = field.selection_set.selections[0].directives

        assert render_directives(directives) == "@include(if: $a) @skip(if: false)"


class TestFlattening:
    """Test flattening documents without errors."""

    def test_user_name_age(self):
        queries = flatten_source("query { user { name age } }")

        assert queries == [
            canonical("query { user { name } }"),
            canonical("query { user { age } }"),
        ]

    def test_single_leaf_is_unchanged(self):
        queries = flatten_source("query { viewer }")

        assert queries == [canonical("query { viewer }")]

    def test_leaf_count_matches_without_fragments(self):
        source = """
        {
            a { b c { d e } }
            f
            g { h { i { j } } k }
        }
        """
        document = parse_document(source)
        queries = flatten(document)

        assert len(queries) == count_leaves(document.definitions[0].selection_set)
        assert [leaf_path(query) for query in queries] == [
            ["a", "b"],
            ["a", "c", "d"],
            ["a", "c", "e"],
            ["f"],
            ["g", "h", "i", "j"],
            ["g", "k"],
        ]

    def test_sibling_paths_are_independent(self):
        queries = flatten_source("{ a { b c } d }")

        assert "b" not in leaf_path(queries[1])
        assert leaf_path(queries[1]) == ["a", "c"]
        assert leaf_path(queries[2]) == ["d"]

    def test_every_query_reparses(self, composite_document):
        for query in flatten_source(composite_document):
            assert canonical(query) == query

    def test_operation_header_is_kept(self):
        queries = flatten_source(
            "query GetUser($id: ID!, $n: Int = 3) @cached { user(id: $id) { name } }"
        )

        assert queries == [
            canonical(
                "query GetUser($id: ID!, $n: Int = 3) @cached { user(id: $id) { name } }"
            )
        ]

    def test_alias_arguments_and_directives(self):
        queries = flatten_source(
            '{ me: user(id: 1, role: "admin") @include(if: true) { fullName: name } }'
        )

        assert queries == [
            canonical(
                '{ me: user(id: 1, role: "admin") @include(if: true) { fullName: name } }'
            )
        ]

    def test_fragment_spread_is_inlined(self):
        queries = flatten_source(
            """
            { a { ...F } }
            fragment F on A { b c }
            """
        )

        assert queries == [
            canonical("{ a { ... on A { b } } }"),
            canonical("{ a { ... on A { c } } }"),
        ]

    def test_fragment_spread_directives(self):
        queries = flatten_source(
            """
            query ($show: Boolean!) { a { ...F @include(if: $show) } }
            fragment F on A { b }
            """
        )

        assert queries == [
            canonical(
                "query ($show: Boolean!) { a { ... on A @include(if: $show) { b } } }"
            )
        ]

    def test_fragment_spread_from_several_locations(self):
        queries = flatten_source(
            """
            { a { ...F } c { ...F } }
            fragment F on Node { id }
            """
        )

        assert queries == [
            canonical("{ a { ... on Node { id } } }"),
            canonical("{ c { ... on Node { id } } }"),
        ]

    def test_nested_fragments(self):
        queries = flatten_source(
            """
            { a { ...Outer } }
            fragment Outer on A { b { ...Inner } }
            fragment Inner on B { c }
            """
        )

        assert queries == [canonical("{ a { ... on A { b { ... on B { c } } } } }")]

    def test_inline_fragment_with_type_condition(self):
        queries = flatten_source("{ node { ... on User { name } } }")

        assert queries == [canonical("{ node { ... on User { name } } }")]

    def test_inline_fragment_without_type_condition(self):
        queries = flatten_source("{ node { ... @include(if: true) { id } } }")

        assert queries == [canonical("{ node { ... @include(if: true) { id } } }")]

    def test_composite_document_order(self, composite_document):
        queries = flatten_source(composite_document)

        assert [leaf_path(query) for query in queries] == [
            ["user", "name"],
            ["user", "friends", "name"],
            ["user", "email"],
            ["user", "phone"],
            ["user", "permissions"],
        ]

    def test_only_query_operations(self):
        queries = flatten_source(
            """
            query A { a }
            mutation M { createThing { id } }
            subscription S { events { id } }
            query B { b { c } }
            """
        )

        assert queries == [canonical("query A { a }"), canonical("query B { b { c } }")]

    def test_document_with_only_fragments(self):
        assert flatten_source("fragment F on A { b }") == []

    def test_variables_declared_on_every_leaf(self):
        queries = flatten_source("query Q($a: Int, $b: Int) { x(v: $a) y(v: $b) }")

        assert queries == [
            canonical("query Q($a: Int, $b: Int) { x(v: $a) }"),
            canonical("query Q($a: Int, $b: Int) { y(v: $b) }"),
        ]

    def test_prune_unused_variables(self):
        queries = flatten_source(
            "query Q($a: Int, $b: Int) { x(v: $a) y(v: $b) z }",
            prune_variables=True,
        )

        assert queries == [
            canonical("query Q($a: Int) { x(v: $a) }"),
            canonical("query Q($b: Int) { y(v: $b) }"),
            canonical("query Q { z }"),
        ]

    def test_prune_keeps_directive_variables(self):
        document = parse("query ($on: Boolean!, $off: Int) @live(if: $on) { x }")
        pruned = prune_unused_variables(document)

        assert print_ast(pruned) == canonical("query ($on: Boolean!) @live(if: $on) { x }")


class TestFlatteningErrors:
    """Test fatal flattening conditions."""

    def test_unknown_fragment(self):
        with pytest.raises(FragmentNotFoundError) as exc_info:
            flatten_source("{ a { ...Missing } }")

        assert exc_info.value.fragment_name == "Missing"
        assert "cannot find fragment with name Missing" in str(exc_info.value)

    def test_duplicate_fragment(self):
        with pytest.raises(DuplicateFragmentError) as exc_info:
            flatten_source(
                """
                { a { ...F } }
                fragment F on A { b }
                fragment F on A { c }
                """
            )

        assert exc_info.value.fragment_name == "F"

    def test_fragment_cycle(self):
        with pytest.raises(FragmentCycleError) as exc_info:
            flatten_source(
                """
                { a { ...F } }
                fragment F on A { b { ...G } }
                fragment G on B { c { ...F } }
                """
            )

        assert exc_info.value.chain == ("F", "G", "F")

    def test_unparseable_reconstruction(self):
        flattener = QueryFlattener(parse_document("{ a }"))

        with pytest.raises(SerializationError) as exc_info:
            flattener._path_to_query(("query", "}"))

        assert exc_info.value.query_text == "query { } }"
