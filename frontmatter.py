"""
frontmatter.py
==============
Parser for the small YAML-like header that may open a game's text file::

    ---
    images: ["shot1.png", "shot2.png"]
    imagesStart: 1
    tags:
      - rpg
      - indie
    ---
    Body text starts here.

Only a tiny subset of YAML is understood: ``key: value`` pairs, bracketed
lists, and ``- item`` continuation lines for the preceding key.  Anything
the tokenizer does not recognise is skipped rather than rejected, so a
malformed header never prevents the body from being shown.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger('ginfo.frontmatter')

DELIMITER = '---'
SUMMARY_MAX_LENGTH = 160
ELLIPSIS = '…'
BOM = '\ufeff'

MetaValue = Union[int, float, str, List[str]]

_KEY_VALUE_RE = re.compile(r'^([A-Za-z0-9_\-]+)\s*:\s*(.*)$')
_NUMBER_RE = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$')

# Tokenizer states
SEEKING_DELIMITER = 'seeking-delimiter'
IN_BLOCK = 'in-block'
IN_LIST = 'in-list'
IN_BODY = 'in-body'


class ParsedDocument:
    """Metadata block plus body text of one game file."""

    def __init__(self, metadata: Optional[Dict[str, MetaValue]] = None,
                 body: str = '') -> None:
        self.metadata: Dict[str, MetaValue] = metadata or {}
        self.body = body

    @property
    def has_metadata(self) -> bool:
        return bool(self.metadata)

    @property
    def summary(self) -> Optional[str]:
        return derive_summary(self.metadata, self.body)

    def to_dict(self) -> Dict[str, Any]:
        return {'metadata': self.metadata, 'body': self.body, 'summary': self.summary}


def strip_quotes(value: str) -> str:
    """Remove one pair of matching surrounding quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def parse_bracket_list(value: str) -> List[Any]:
    """Parse ``[a, b]`` style values.

    Strict JSON is tried first; when that fails the content is split on
    commas and each item has its surrounding quotes removed.
    """
    try:
        parsed = json.loads(value)
        if isinstance(parsed, list):
            return parsed
    except ValueError:
        pass
    inner = value[1:-1]
    items = [strip_quotes(part.strip()) for part in inner.split(',')]
    return [item for item in items if item]


def coerce_scalar(value: str) -> Union[int, float, str]:
    """Return *value* as an int or float when it looks numeric."""
    if _NUMBER_RE.match(value):
        try:
            return int(value)
        except ValueError:
            return float(value)
    return value


def decode_value(raw: str, existing: Optional[MetaValue] = None) -> MetaValue:
    """Decode the right-hand side of a ``key: value`` line."""
    value = raw.strip()
    if value.startswith('[') and value.endswith(']'):
        return parse_bracket_list(value)
    if value == '':
        # Filled by following "- item" lines
        return existing if isinstance(existing, list) else []
    return coerce_scalar(value)


class FrontMatterTokenizer:
    """Line-driven state machine that splits a document into header and body.

    States move ``seeking-delimiter -> in-block <-> in-list -> in-body``.
    Unterminated headers are rolled back so the whole input becomes body.
    """

    def __init__(self) -> None:
        self.state = SEEKING_DELIMITER
        self.metadata: Dict[str, MetaValue] = {}
        self.current_key: Optional[str] = None

    def feed_header_line(self, line: str) -> None:
        stripped = line.strip()
        if not stripped or stripped.startswith('#'):
            return

        if stripped.startswith('-') and self.current_key is not None:
            item = strip_quotes(stripped[1:].strip())
            current = self.metadata.get(self.current_key)
            if not isinstance(current, list):
                current = []
                self.metadata[self.current_key] = current
            current.append(item)
            self.state = IN_LIST
            return

        match = _KEY_VALUE_RE.match(stripped)
        if not match:
            logger.debug("Skipping unrecognised front-matter line: %r", line)
            return
        key, raw_value = match.group(1), match.group(2)
        self.metadata[key] = decode_value(raw_value, self.metadata.get(key))
        self.current_key = key
        self.state = IN_BLOCK

    def parse(self, text: Optional[str]) -> ParsedDocument:
        text = (text or '').lstrip(BOM)
        if not text:
            return ParsedDocument({}, '')

        lines = text.splitlines(keepends=True)
        if lines[0].rstrip('\r\n').rstrip() != DELIMITER:
            return ParsedDocument({}, text)

        self.state = IN_BLOCK
        for idx in range(1, len(lines)):
            line = lines[idx].rstrip('\r\n')
            if line.strip() == DELIMITER:
                self.state = IN_BODY
                body = ''.join(lines[idx + 1:]).lstrip()
                return ParsedDocument(self.metadata, body)
            self.feed_header_line(line)

        # No closing delimiter: fail open
        logger.debug("Front-matter block never closed; treating input as body")
        return ParsedDocument({}, text)


def parse_front_matter(text: Optional[str]) -> ParsedDocument:
    """Split *text* into its metadata header and body."""
    return FrontMatterTokenizer().parse(text)


def truncate(text: str, max_length: int = SUMMARY_MAX_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length - len(ELLIPSIS)].rstrip() + ELLIPSIS


def derive_summary(metadata: Optional[Dict[str, MetaValue]], body: Optional[str],
                   max_length: int = SUMMARY_MAX_LENGTH) -> Optional[str]:
    """Pick a one-line summary for grid cards.

    An explicit ``summary`` key wins; otherwise the first non-empty body
    line is used.
    """
    if metadata and metadata.get('summary') not in (None, '', []):
        value = metadata['summary']
        if isinstance(value, list):
            text = ' '.join(str(v) for v in value)
        else:
            text = str(value)
        return truncate(text.strip(), max_length)

    for line in (body or '').splitlines():
        if line.strip():
            return truncate(line.strip(), max_length)
    return None
