#!/usr/bin/env python3
"""
Unit tests for the front-matter parser.

Run with:
    python -m pytest tests/test_frontmatter.py
"""
import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import frontmatter
from frontmatter import derive_summary, parse_front_matter


class TestNoFrontMatter(unittest.TestCase):
    """Inputs without the opening delimiter are returned untouched."""

    def test_plain_text_is_body(self):
        text = "Just a description.\nSecond line."
        doc = parse_front_matter(text)
        self.assertEqual(doc.metadata, {})
        self.assertEqual(doc.body, text)

    def test_leading_whitespace_preserved(self):
        text = "\n\n  indented start"
        self.assertEqual(parse_front_matter(text).body, text)

    def test_delimiter_not_on_first_line(self):
        text = "Intro\n---\nimages: [a.png]\n---\nbody"
        doc = parse_front_matter(text)
        self.assertEqual(doc.metadata, {})
        self.assertEqual(doc.body, text)

    def test_empty_and_none(self):
        self.assertEqual(parse_front_matter('').body, '')
        self.assertEqual(parse_front_matter(None).body, '')
        self.assertEqual(parse_front_matter(None).metadata, {})


class TestDelimiters(unittest.TestCase):

    def test_body_after_closing_delimiter(self):
        doc = parse_front_matter("---\ntitle: Celeste\n---\n\n  Climb the mountain.\n")
        self.assertEqual(doc.metadata, {'title': 'Celeste'})
        self.assertEqual(doc.body, "Climb the mountain.\n")

    def test_unclosed_block_fails_open(self):
        text = "---\ntitle: Celeste\nno closing line"
        doc = parse_front_matter(text)
        self.assertEqual(doc.metadata, {})
        self.assertEqual(doc.body, text)

    def test_crlf_line_endings(self):
        doc = parse_front_matter("---\r\nimagesStart: 3\r\n---\r\nBody")
        self.assertEqual(doc.metadata, {'imagesStart': 3})
        self.assertEqual(doc.body, "Body")

    def test_empty_block(self):
        doc = parse_front_matter("---\n---\nBody only")
        self.assertEqual(doc.metadata, {})
        self.assertEqual(doc.body, "Body only")

    def test_byte_order_mark_ignored(self):
        doc = parse_front_matter('\ufeff---\nimages: ["a.png"]\n---\nBody')
        self.assertEqual(doc.metadata, {'images': ['a.png']})
        self.assertEqual(doc.body, 'Body')

    def test_byte_order_mark_without_header(self):
        self.assertEqual(parse_front_matter('\ufeffPlain text').body, 'Plain text')
        self.assertEqual(parse_front_matter('\ufeff').body, '')


class TestValues(unittest.TestCase):

    def _meta(self, block):
        return parse_front_matter("---\n" + block + "\n---\nbody").metadata

    def test_bracketed_json_list(self):
        meta = self._meta('images: ["a.png","b.png"]')
        self.assertEqual(meta['images'], ["a.png", "b.png"])

    def test_bracketed_list_comma_fallback(self):
        meta = self._meta("images: [a.png, 'b c.png', \"d.png\"]")
        self.assertEqual(meta['images'], ["a.png", "b c.png", "d.png"])

    def test_empty_bracketed_list(self):
        self.assertEqual(self._meta('images: []')['images'], [])

    def test_dash_continuation(self):
        meta = self._meta("tags:\n  - rpg\n  - indie")
        self.assertEqual(meta['tags'], ["rpg", "indie"])

    def test_dash_continuation_strips_quotes(self):
        meta = self._meta('videos:\n  - "https://youtu.be/abcdefg"')
        self.assertEqual(meta['videos'], ["https://youtu.be/abcdefg"])

    def test_continuation_belongs_to_latest_key(self):
        meta = self._meta("tags:\n - rpg\nimages:\n - a.png\n - b.png")
        self.assertEqual(meta['tags'], ["rpg"])
        self.assertEqual(meta['images'], ["a.png", "b.png"])

    def test_integer_and_float(self):
        meta = self._meta("imagesStart: 2\nrating: 4.5\nnegative: -3")
        self.assertEqual(meta['imagesStart'], 2)
        self.assertIsInstance(meta['imagesStart'], int)
        self.assertEqual(meta['rating'], 4.5)
        self.assertEqual(meta['negative'], -3)

    def test_non_numeric_stays_string(self):
        meta = self._meta("imagesEnd: ten\nversion: 1.2.3")
        self.assertEqual(meta['imagesEnd'], 'ten')
        self.assertEqual(meta['version'], '1.2.3')

    def test_value_with_colon(self):
        meta = self._meta("imagesRawBaseUrl: https://cdn.example.com/{game}")
        self.assertEqual(meta['imagesRawBaseUrl'], "https://cdn.example.com/{game}")

    def test_comments_and_blank_lines_skipped(self):
        meta = self._meta("# a comment\n\ntitle: X\n   \n")
        self.assertEqual(meta, {'title': 'X'})

    def test_unrecognised_line_ignored(self):
        meta = self._meta("title: X\nthis line has no key\nyear: 2018")
        self.assertEqual(meta, {'title': 'X', 'year': 2018})


class TestTokenizerStates(unittest.TestCase):

    def test_ends_in_body_state(self):
        tok = frontmatter.FrontMatterTokenizer()
        tok.parse("---\ntags:\n - a\n---\nbody")
        self.assertEqual(tok.state, frontmatter.IN_BODY)

    def test_list_state_after_dash_line(self):
        tok = frontmatter.FrontMatterTokenizer()
        tok.state = frontmatter.IN_BLOCK
        tok.feed_header_line("tags:")
        tok.feed_header_line("- a")
        self.assertEqual(tok.state, frontmatter.IN_LIST)
        tok.feed_header_line("title: x")
        self.assertEqual(tok.state, frontmatter.IN_BLOCK)


class TestSummary(unittest.TestCase):

    def test_explicit_summary_wins(self):
        self.assertEqual(derive_summary({'summary': 'Short'}, 'Body line'), 'Short')

    def test_list_summary_joined(self):
        self.assertEqual(derive_summary({'summary': ['a', 'b']}, ''), 'a b')

    def test_first_non_empty_body_line(self):
        self.assertEqual(derive_summary({}, "\n\n  First line  \nSecond"), 'First line')

    def test_truncated_with_ellipsis(self):
        summary = derive_summary({}, 'x' * 500, max_length=20)
        self.assertEqual(len(summary), 20)
        self.assertTrue(summary.endswith(frontmatter.ELLIPSIS))

    def test_none_when_nothing_available(self):
        self.assertIsNone(derive_summary({}, '   \n'))

    def test_document_summary_property(self):
        doc = parse_front_matter("---\ntitle: X\n---\nHello world")
        self.assertEqual(doc.summary, 'Hello world')


if __name__ == '__main__':
    unittest.main()
