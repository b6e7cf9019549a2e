"""Tests for classifier-based syntax highlighting."""

import unittest

from pygments import token as T
from pygments.lexers import PythonLexer

from thirty25.render.highlight import (
    Range,
    classification_to_css,
    fill_gaps,
    highlight_code,
    highlight_html,
    lexer_for,
)


class TestClassificationToCss(unittest.TestCase):
    def test_known_classifications(self) -> None:
        self.assertEqual(classification_to_css(T.Keyword.Constant), "keyword")
        self.assertEqual(classification_to_css(T.Name.Class), "title.class")
        self.assertEqual(classification_to_css(T.Name.Function), "title.function")
        self.assertEqual(classification_to_css(T.Name.Builtin), "symbol")
        self.assertEqual(classification_to_css(T.Literal.String.Doc), "string")
        self.assertEqual(classification_to_css(T.Comment.Single), "comment")

    def test_plain_text_has_no_class(self) -> None:
        self.assertEqual(classification_to_css(T.Text), "")
        self.assertEqual(classification_to_css(T.Whitespace), "")
        self.assertEqual(classification_to_css(None), "")

    def test_unmapped_falls_back_to_name(self) -> None:
        self.assertEqual(classification_to_css(T.Generic.Heading), "generic-heading")


class TestFillGaps(unittest.TestCase):
    def test_gaps_become_unclassified(self) -> None:
        ranges = list(fill_gaps("abcdef", [Range(1, 3, T.Keyword, "bc")]))
        self.assertEqual(
            [(r.start, r.end, r.classification, r.text) for r in ranges],
            [(0, 1, None, "a"), (1, 3, T.Keyword, "bc"), (3, 6, None, "def")],
        )

    def test_duplicate_spans_dropped(self) -> None:
        spans = [Range(0, 2, T.Keyword, "ab"), Range(0, 2, T.Keyword, "ab")]
        self.assertEqual(len(list(fill_gaps("ab", spans))), 1)

    def test_covers_whole_text(self) -> None:
        text = "x = 1  # one\n"
        ranges = list(fill_gaps(text, []))
        self.assertEqual("".join(r.text for r in ranges), text)


class TestHighlightHtml(unittest.TestCase):
    def test_highlights_python_block(self) -> None:
        html = '<pre><code class="language-python">def foo():\n    return 1\n</code></pre>'
        out, changed = highlight_html(html)
        self.assertTrue(changed)
        self.assertIn('<span class="token keyword">def</span>', out)
        self.assertIn('<span class="token title.function">foo</span>', out)
        self.assertIn('<span class="token number">1</span>', out)
        self.assertIn('class="language-python hljs"', out)

    def test_text_is_escaped(self) -> None:
        html = '<pre><code class="language-python">a &lt; b</code></pre>'
        out, _ = highlight_html(html)
        self.assertIn('<span class="token operator">&lt;</span>', out)
        self.assertNotIn("a < b", out)

    def test_unknown_language_unchanged(self) -> None:
        html = '<pre><code class="language-notareallanguage">x</code></pre>'
        self.assertEqual(highlight_html(html), (html, False))

    def test_already_highlighted_unchanged(self) -> None:
        html = '<pre><code class="language-python hljs">x = 1</code></pre>'
        self.assertEqual(highlight_html(html), (html, False))

    def test_code_without_language_unchanged(self) -> None:
        html = "<p>Inline <code>x</code></p><pre><code>plain</code></pre>"
        self.assertEqual(highlight_html(html), (html, False))

    def test_lexer_for(self) -> None:
        self.assertIsNotNone(lexer_for(["foo", "language-csharp"]))
        self.assertIsNone(lexer_for(["language-"]))
        self.assertIsNone(lexer_for(["plain"]))

    def test_highlight_code_preserves_text(self) -> None:
        code = "class A:\n    pass\n"
        out = highlight_code(code, PythonLexer(stripnl=False, ensurenl=False))
        self.assertIn('<span class="token title.class">A</span>', out)
        self.assertTrue(out.endswith("\n"))


if __name__ == "__main__":
    unittest.main()
