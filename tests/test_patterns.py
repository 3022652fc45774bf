"""Tests for the module reference recognizers."""

from depsize.utils.patterns import (
    CALL_PATTERN,
    EXPORT_PATTERN,
    IMPORT_PATTERN,
    REFERENCE_PATTERNS,
    find_references,
)


def refs(text, pattern):
    return list(find_references(text, pattern))


class TestCallPattern:
    """Tests for require-style calls."""

    def test_require_with_either_quote(self):
        assert refs("const a = require('lodash')", CALL_PATTERN) == ["lodash"]
        assert refs('const a = require("lodash")', CALL_PATTERN) == ["lodash"]

    def test_backtick_quotes(self):
        assert refs("require(`left-pad`)", CALL_PATTERN) == ["left-pad"]

    def test_other_keywords(self):
        text = "\n".join(
            [
                "require.resolve('resolved')",
                "proxyquire('stubbed', {})",
                "require_relative 'ruby_style'",
                "const lazy = import('dynamic')",
            ]
        )
        assert refs(text, CALL_PATTERN) == ["resolved", "stubbed", "ruby_style", "dynamic"]

    def test_whitespace_around_paren(self):
        assert refs("require ( 'spaced' )", CALL_PATTERN) == ["spaced"]

    def test_mismatched_quotes_are_rejected(self):
        assert refs("require(\"broken')", CALL_PATTERN) == []

    def test_quoted_word_cannot_contain_whitespace(self):
        assert refs("require('not a module')", CALL_PATTERN) == []


class TestImportPattern:
    """Tests for declarative imports."""

    def test_default_and_named_members(self):
        text = 'import React, { useState } from "react";'
        assert refs(text, IMPORT_PATTERN) == ["react"]

    def test_namespace_import(self):
        assert refs("import * as path from 'path'", IMPORT_PATTERN) == ["path"]

    def test_bare_import(self):
        assert refs('import "core-js/stable";', IMPORT_PATTERN) == ["core-js/stable"]

    def test_multiline_members(self):
        text = 'import {\n  a,\n  b,\n} from "multi-line";'
        assert refs(text, IMPORT_PATTERN) == ["multi-line"]

    def test_dollar_in_members(self):
        assert refs("import $ from 'jquery'", IMPORT_PATTERN) == ["jquery"]

    def test_consecutive_imports(self):
        text = 'import a from "first"\nimport b from "second"\n'
        assert refs(text, IMPORT_PATTERN) == ["first", "second"]

    def test_backticks_not_accepted(self):
        assert refs("import `template`", IMPORT_PATTERN) == []


class TestExportPattern:
    """Tests for re-exports."""

    def test_named_reexport(self):
        assert refs('export { a, b } from "reexported"', EXPORT_PATTERN) == ["reexported"]

    def test_star_reexport(self):
        assert refs("export * from 'everything'", EXPORT_PATTERN) == ["everything"]

    def test_from_clause_is_mandatory(self):
        assert refs('export const name = "value";', EXPORT_PATTERN) == []
        assert refs('export default "value";', EXPORT_PATTERN) == []


def test_pattern_library_order():
    assert REFERENCE_PATTERNS == (CALL_PATTERN, IMPORT_PATTERN, EXPORT_PATTERN)
