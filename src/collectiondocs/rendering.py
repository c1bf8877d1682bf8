"""Markdown rendering and code-sample highlighting.

``render_text`` is the only thing the build stages know about rendering: a
pure ``str -> str`` function. Fenced code blocks are highlighted with
Pygments through the Markdown ``codehilite`` extension.
"""
from __future__ import annotations

import re
from collections.abc import Callable
from functools import partial
from typing import Any, TypeAlias

import markdown
from pygments import highlight as _pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from collectiondocs.doc_types import Sample

Renderer: TypeAlias = Callable[[str], str]

DEFAULT_SAMPLE_LANGUAGE = "javascript"

_LEADING_P_RE = re.compile(r"^<p>")
_TRAILING_P_RE = re.compile(r"</p>\n?$")

_SAMPLE_FORMATTER = HtmlFormatter(nowrap=True)


def render_text(text: str, *, highlight: bool = True) -> str:
    """Render Markdown to HTML."""
    if not text:
        return ""
    extensions: list[str] = ["fenced_code", "tables"]
    configs: dict[str, dict[str, Any]] = {}
    if highlight:
        extensions.append("codehilite")
        configs["codehilite"] = {"css_class": "highlight", "guess_lang": False}
    return markdown.markdown(text, extensions=extensions, extension_configs=configs)


def make_renderer(*, highlight: bool = True) -> Renderer:
    return partial(render_text, highlight=highlight)


def strip_paragraph(html: str) -> str:
    """Drop one wrapping ``<p>`` ... ``</p>`` pair, for inline summaries."""
    return _TRAILING_P_RE.sub("", _LEADING_P_RE.sub("", html, count=1), count=1)


def highlight_code(code: str, language: str = DEFAULT_SAMPLE_LANGUAGE) -> str:
    """Highlight a code snippet as inline HTML spans.

    Raises ValueError for a language Pygments does not know.
    """
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound as exc:
        raise ValueError(f"Unknown sample language: {language!r}") from exc
    return _pygments_highlight(code, lexer, _SAMPLE_FORMATTER)


def parse_sample(raw: Any) -> Sample:
    """Parse one front-matter sample.

    A sample is either a bare code string or a mapping with ``code`` (or
    ``input``), optional ``output`` and optional ``language``.
    """
    if isinstance(raw, str):
        return Sample(code=raw, html=highlight_code(raw))
    if not isinstance(raw, dict):
        raise ValueError(f"Sample must be a string or mapping, got {type(raw).__name__}")
    code = raw.get("code", raw.get("input"))
    if not isinstance(code, str):
        raise ValueError("Sample mapping needs a string 'code' field")
    language = str(raw.get("language") or DEFAULT_SAMPLE_LANGUAGE)
    output = raw.get("output")
    return Sample(
        code=code,
        html=highlight_code(code, language),
        output=None if output is None else str(output),
        language=language,
    )
