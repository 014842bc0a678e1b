"""Tests for webext_types.parser.flow -- blanking type annotations."""

from __future__ import annotations

import pytest

from webext_types.parser.flow import strip_flow_types
from webext_types.parser.syntax import parse_module


def _assert_layout_preserved(original: str, stripped: str) -> None:
    """Stripping never changes the byte length or the line structure."""
    assert len(stripped.encode("utf-8")) == len(original.encode("utf-8"))
    assert [len(line) for line in stripped.split("\n")] == [
        len(line) for line in original.split("\n")
    ]


class TestStripFlowTypes:
    """Type syntax is replaced by spaces; runtime code is kept."""

    def test_parameter_and_return_annotations(self) -> None:
        source = "function f(a: string, b: number): void { return a; }"
        stripped = strip_flow_types(source)

        assert stripped == "function f(a        , b        )       { return a; }"
        _assert_layout_preserved(source, stripped)

    def test_plain_javascript_unchanged(self) -> None:
        source = "const x = { a: 1, b: [1, 2] };\nfunction g(y) { return y ? 1 : 2; }\n"
        assert strip_flow_types(source) == source

    def test_variable_annotation(self) -> None:
        stripped = strip_flow_types("const log: Logger = createLogger();")
        assert stripped == "const log         = createLogger();"

    def test_type_alias_removed(self) -> None:
        source = "type Opts = {\n  a?: string,\n};\nconst x = 1;\n"
        stripped = strip_flow_types(source)

        assert "type" not in stripped
        assert stripped.endswith("const x = 1;\n")
        _assert_layout_preserved(source, stripped)

    def test_exported_type_alias_removed(self) -> None:
        stripped = strip_flow_types("export type P = { a: string };\nexport const y = 2;\n")
        assert stripped.split("\n")[0].strip() == ""
        assert "export const y = 2;" in stripped

    def test_import_type_removed(self) -> None:
        source = "import type { Manifest } from './manifest.js';\nimport fs from 'fs';\n"
        stripped = strip_flow_types(source)

        assert stripped.split("\n")[0].strip() == ""
        assert "import fs from 'fs';" in stripped

    def test_inline_type_specifier_removed(self) -> None:
        stripped = strip_flow_types("import { type Logger, createLogger } from './log.js';")
        assert "Logger," not in stripped
        assert "createLogger" in stripped
        parse_module(stripped)

    def test_generic_arguments_removed(self) -> None:
        stripped = strip_flow_types("const xs: Array<string> = [];\nasync function m(): Promise<any> {}\n")
        assert "<" not in stripped
        assert "Array" not in stripped
        assert "Promise" not in stripped

    def test_class_field_annotations(self) -> None:
        source = "class P {\n  yargs: any;\n  run(x: string): P { return this; }\n}\n"
        stripped = strip_flow_types(source)

        assert "any" not in stripped
        assert ": P" not in stripped
        parse_module(stripped)

    def test_annotated_destructured_parameter(self) -> None:
        source = "function m(dir: string, { a = 1 }: Params = {}): Promise<any> {}"
        stripped = strip_flow_types(source)

        assert "{ a = 1 }" in stripped
        assert "= {}" in stripped
        assert "Params" not in stripped
        parse_module(stripped)

    def test_arrow_function_annotations(self) -> None:
        stripped = strip_flow_types("const f = (value: any): any => value;")
        assert stripped.replace(" ", "") == "constf=(value)=>value;"

    def test_strings_and_comments_untouched(self) -> None:
        source = "// a: string\nconst s = 'x: number';\n"
        assert strip_flow_types(source) == source

    def test_non_ascii_layout_preserved(self) -> None:
        source = "const s: string = 'héllo ✓';\n"
        stripped = strip_flow_types(source)

        assert "'héllo ✓'" in stripped
        _assert_layout_preserved(source, stripped)

    def test_fixture_becomes_valid_javascript(self, program_js: str) -> None:
        stripped = strip_flow_types(program_js)

        _assert_layout_preserved(program_js, stripped)
        tree = parse_module(stripped)
        assert not tree.root.has_error

    @pytest.mark.parametrize(
        "source",
        [
            "const n = (x as any);",
            "const n = x!;",
        ],
    )
    def test_expression_level_type_syntax(self, source: str) -> None:
        stripped = strip_flow_types(source)
        assert "x" in stripped
        assert "any" not in stripped
        assert "!" not in stripped
