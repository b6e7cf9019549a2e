"""Tests for gathering headings into a table-of-contents tree."""

import unittest

from thirty25.content.headings import assign_heading_ids, flatten, gather_headings, render_toc


def _shape(nodes):
    return [(n.text, _shape(n.children)) for n in nodes]


class TestGatherHeadings(unittest.TestCase):
    def test_empty_document(self) -> None:
        self.assertEqual(gather_headings("<p>No headings here.</p>"), [])

    def test_siblings_and_roots(self) -> None:
        html = '<h1 id="a">A</h1><h2 id="b">B</h2><h2 id="c">C</h2><h1 id="d">D</h1>'
        roots = gather_headings(html)
        self.assertEqual(_shape(roots), [("A", [("B", []), ("C", [])]), ("D", [])])
        self.assertEqual(roots[0].children[1].id, "c")

    def test_level_jump_attaches_to_nearest_shallower(self) -> None:
        html = "<h1>A</h1><h3>C</h3><h2>B</h2>"
        roots = gather_headings(html, level=3)
        self.assertEqual(_shape(roots), [("A", [("C", []), ("B", [])])])

    def test_deeper_heading_then_shallower_returns_to_parent(self) -> None:
        html = "<h1>A</h1><h2>B</h2><h3>C</h3><h2>D</h2>"
        roots = gather_headings(html, level=3)
        self.assertEqual(_shape(roots), [("A", [("B", [("C", [])]), ("D", [])])])

    def test_first_heading_deeper_than_later_ones(self) -> None:
        html = "<h3>X</h3><h2>Y</h2><h1>Z</h1>"
        roots = gather_headings(html, level=3)
        self.assertEqual([r.text for r in roots], ["X", "Y", "Z"])
        self.assertTrue(all(not r.children for r in roots))

    def test_level_limits_gathered_headings(self) -> None:
        html = "<h1>A</h1><h2>B</h2><h3>C</h3>"
        self.assertEqual([h.text for h in flatten(gather_headings(html, level=2))], ["A", "B"])

    def test_nested_elements_keep_markup(self) -> None:
        html = '<h2 id="x">Use <code>foo()</code> now</h2>'
        nested = gather_headings(html, nested_elements=True)[0]
        self.assertEqual(nested.text, "Use foo() now")
        self.assertEqual(nested.content, "Use <code>foo()</code> now")

        plain = gather_headings(html, nested_elements=False)[0]
        self.assertEqual(plain.content, "Use foo() now")

    def test_entities_are_decoded_in_text(self) -> None:
        html = "<h2>Fish &amp; Chips</h2>"
        heading = gather_headings(html, nested_elements=True)[0]
        self.assertEqual(heading.text, "Fish & Chips")
        self.assertEqual(heading.content, "Fish &amp; Chips")

    def test_flatten_matches_document_order(self) -> None:
        html = "<h1>1</h1><h2>2</h2><h3>3</h3><h2>4</h2><h1>5</h1><h3>6</h3>"
        roots = gather_headings(html, level=3)
        flat = flatten(roots)
        self.assertEqual([h.text for h in flat], ["1", "2", "3", "4", "5", "6"])
        self.assertEqual([h.level for h in flat], [1, 2, 3, 2, 1, 3])


class TestHeadingIds(unittest.TestCase):
    def test_assigns_unique_ids(self) -> None:
        html = assign_heading_ids('<h2>Intro</h2><h2>Intro</h2><h2 id="x">X</h2><h3>Hello, World!</h3>')
        ids = [h.id for h in flatten(gather_headings(html, level=3))]
        self.assertEqual(ids, ["intro", "intro-1", "x", "hello-world"])

    def test_existing_ids_left_alone(self) -> None:
        html = '<h2 id="keep">Keep</h2>'
        self.assertEqual(assign_heading_ids(html), html)


class TestRenderToc(unittest.TestCase):
    def test_nested_lists(self) -> None:
        roots = gather_headings('<h1 id="a">A</h1><h2 id="b">B &lt;T&gt;</h2>')
        toc = render_toc(roots)
        self.assertTrue(toc.startswith('<ul><li><a href="#a">A</a><ul>'))
        self.assertIn('<a href="#b">B &lt;T&gt;</a>', toc)

    def test_empty(self) -> None:
        self.assertEqual(render_toc([]), "")


if __name__ == "__main__":
    unittest.main()
