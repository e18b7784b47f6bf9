"""Pretty-printers for code blocks, keyed by declared language."""

from __future__ import annotations

from enum import Enum

import cssbeautifier
import jsbeautifier
import mdformat
import yaml
from bs4 import BeautifulSoup
from graphql import parse as parse_graphql
from graphql import print_ast

from wp2md.errors import FormatterError


class Syntax(str, Enum):
    BABEL = "babel"
    BABEL_TS = "babel-ts"
    CSS = "css"
    LESS = "less"
    SCSS = "scss"
    GRAPHQL = "graphql"
    HTML = "html"
    VUE = "vue"
    ANGULAR = "angular"
    LWC = "lwc"
    YAML = "yaml"
    MARKDOWN = "markdown"
    MDX = "mdx"


# Anything not listed here is left unformatted.
LANGUAGE_SYNTAX: dict[str, Syntax] = {
    "js": Syntax.BABEL,
    "javascript": Syntax.BABEL,
    "jsx": Syntax.BABEL,
    "ts": Syntax.BABEL_TS,
    "typescript": Syntax.BABEL_TS,
    "tsx": Syntax.BABEL_TS,
    "css": Syntax.CSS,
    "less": Syntax.LESS,
    "scss": Syntax.SCSS,
    "graphql": Syntax.GRAPHQL,
    "html": Syntax.HTML,
    "vue": Syntax.VUE,
    "angular": Syntax.ANGULAR,
    "lwc": Syntax.LWC,
    "yaml": Syntax.YAML,
    "yml": Syntax.YAML,
    "markdown": Syntax.MARKDOWN,
    "md": Syntax.MARKDOWN,
    "mdx": Syntax.MDX,
}


def syntax_for(lang: str | None) -> Syntax | None:
    """Map a language tag to a formatter syntax, or None if unrecognized."""
    if not lang:
        return None
    return LANGUAGE_SYNTAX.get(lang.strip().lower())


def _format_script(text: str, typescript: bool = False) -> str:
    opts = jsbeautifier.default_options()
    opts.indent_size = 2
    opts.end_with_newline = True
    # e4x keeps JSX tags intact
    opts.e4x = not typescript
    return jsbeautifier.beautify(text, opts)


def _format_stylesheet(text: str) -> str:
    opts = cssbeautifier.default_options()
    opts.indent_size = 2
    opts.end_with_newline = True
    return cssbeautifier.beautify(text, opts)


def _format_graphql(text: str) -> str:
    return print_ast(parse_graphql(text)) + "\n"


def _format_markup(text: str) -> str:
    return BeautifulSoup(text, "html.parser").prettify()


def _format_yaml(text: str) -> str:
    documents = list(yaml.safe_load_all(text))
    return yaml.safe_dump_all(documents, sort_keys=False, default_flow_style=False)


def _format_markdown(text: str) -> str:
    return mdformat.text(text)


_FORMATTERS = {
    Syntax.BABEL: _format_script,
    Syntax.BABEL_TS: lambda text: _format_script(text, typescript=True),
    Syntax.CSS: _format_stylesheet,
    Syntax.LESS: _format_stylesheet,
    Syntax.SCSS: _format_stylesheet,
    Syntax.GRAPHQL: _format_graphql,
    Syntax.HTML: _format_markup,
    Syntax.VUE: _format_markup,
    Syntax.ANGULAR: _format_markup,
    Syntax.LWC: _format_markup,
    Syntax.YAML: _format_yaml,
    Syntax.MARKDOWN: _format_markdown,
    Syntax.MDX: _format_markdown,
}


def format_code(text: str, syntax: Syntax) -> str:
    """Pretty-print ``text`` for ``syntax``.

    Raises:
        FormatterError: the formatter failed or produced nothing.
    """
    try:
        formatted = _FORMATTERS[syntax](text)
    except Exception as exc:
        raise FormatterError(f"{syntax.value}: {exc}", syntax=syntax.value) from exc

    if not formatted or not formatted.strip():
        raise FormatterError(f"{syntax.value}: formatter returned no output", syntax=syntax.value)
    return formatted
