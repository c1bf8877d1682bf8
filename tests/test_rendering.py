"""Tests for collectiondocs.rendering."""
from __future__ import annotations

import pytest

from collectiondocs.rendering import (
    highlight_code,
    make_renderer,
    parse_sample,
    render_text,
    strip_paragraph,
)


class TestRenderText:
    def test_paragraph(self) -> None:
        assert render_text("Hello *world*") == "<p>Hello <em>world</em></p>"

    def test_empty(self) -> None:
        assert render_text("") == ""

    def test_fenced_code_is_highlighted(self) -> None:
        html = render_text("```js\nvar list = new List();\n```")
        assert 'class="highlight"' in html
        assert "<span" in html

    def test_renderer_without_highlight(self) -> None:
        html = make_renderer(highlight=False)("```js\nvar x;\n```")
        assert "highlight" not in html
        assert "<code" in html


class TestStripParagraph:
    def test_strips_wrapper(self) -> None:
        assert strip_paragraph("<p>Adds a value.</p>\n") == "Adds a value."
        assert strip_paragraph("<p>Adds a value.</p>") == "Adds a value."

    def test_only_outer_pair(self) -> None:
        assert strip_paragraph("<p>a</p>\n<p>b</p>") == "a</p>\n<p>b"

    def test_plain_text_untouched(self) -> None:
        assert strip_paragraph("plain") == "plain"


class TestSamples:
    def test_string_sample(self) -> None:
        sample = parse_sample("var x = 1;")
        assert sample.code == "var x = 1;"
        assert sample.language == "javascript"
        assert "<span" in sample.html
        assert sample.output is None

    def test_mapping_sample(self) -> None:
        sample = parse_sample({"input": "1 + 1", "output": 2, "language": "python"})
        assert sample.code == "1 + 1"
        assert sample.output == "2"
        assert sample.to_dict()["output"] == "2"

    def test_bad_samples(self) -> None:
        with pytest.raises(ValueError, match="string or mapping"):
            parse_sample(42)
        with pytest.raises(ValueError, match="code"):
            parse_sample({"output": "x"})

    def test_unknown_language(self) -> None:
        with pytest.raises(ValueError, match="Unknown sample language"):
            highlight_code("x", "no-such-language-xyz")
