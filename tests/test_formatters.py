"""Tests for wp2md.formatters module."""

import pytest

from wp2md.errors import ConversionError, FormatterError
from wp2md.formatters import Syntax, format_code, syntax_for


class TestSyntaxFor:
    def test_script_languages(self):
        assert syntax_for("js") is Syntax.BABEL
        assert syntax_for("JavaScript") is Syntax.BABEL
        assert syntax_for("tsx") is Syntax.BABEL_TS

    def test_markup_and_style_languages(self):
        assert syntax_for("scss") is Syntax.SCSS
        assert syntax_for("vue") is Syntax.VUE
        assert syntax_for("yml") is Syntax.YAML
        assert syntax_for("mdx") is Syntax.MDX

    def test_unrecognized(self):
        assert syntax_for("cobol") is None
        assert syntax_for("") is None
        assert syntax_for(None) is None


class TestFormatCode:
    def test_javascript(self):
        result = format_code("function f(a,b){return a+b}", Syntax.BABEL)
        assert "function f(a, b) {" in result
        assert "return a + b" in result

    def test_css(self):
        result = format_code("a{color:red}", Syntax.CSS)
        assert "a {" in result
        assert "color: red" in result

    def test_yaml(self):
        assert format_code("a: 1\nb: [1, 2]\n", Syntax.YAML) == "a: 1\nb:\n- 1\n- 2\n"

    def test_graphql(self):
        result = format_code("query { user { id } }", Syntax.GRAPHQL)
        assert "user {" in result
        assert "    id" in result

    def test_markdown(self):
        result = format_code("# Title\nSome text", Syntax.MARKDOWN)
        assert result.startswith("# Title\n\nSome text")

    def test_html(self):
        result = format_code("<div><p>hi</p></div>", Syntax.HTML)
        assert "<div>\n" in result
        assert "hi" in result

    def test_invalid_yaml_raises(self):
        with pytest.raises(FormatterError) as excinfo:
            format_code("a: [1, 2", Syntax.YAML)
        assert excinfo.value.syntax == "yaml"

    def test_invalid_graphql_raises(self):
        with pytest.raises(FormatterError):
            format_code("query {", Syntax.GRAPHQL)

    def test_empty_output_raises(self):
        with pytest.raises(FormatterError):
            format_code("", Syntax.YAML)

    def test_formatter_error_is_conversion_error(self):
        assert issubclass(FormatterError, ConversionError)
