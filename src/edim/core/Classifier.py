# edim/core/Classifier.py
"""edim.core.Classifier
=======================

Rule-driven token scanner used for colour highlighting.

The scanner walks a single line from left to right. At each position it
tries, in priority order:

1. a comment marker: the rest of the line is a COMMENT run;
2. a double quote: STRING through the next quote, or to end of line;
3. an ASCII digit: the maximal digit run is a NUMBER;
4. an ASCII letter: the maximal ASCII-alphanumeric word is a KEYWORD when it
   matches a rule exactly, otherwise PLAIN;
5. anything else: one PLAIN character.

Neighbouring PLAIN pieces are merged, so ``if x // y`` with ``if`` as a
keyword and ``//`` as a comment marker yields three runs. Classification is
pure: the same text and rules always give the same runs, and the Buffer is
never touched.
"""

import logging
import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, NamedTuple, Optional

logger = logging.getLogger("edim.classifier")

_DIGITS = frozenset(string.digits)
_LETTERS = frozenset(string.ascii_letters)
_ALNUM = _DIGITS | _LETTERS


class Category(Enum):
    PLAIN = "plain"
    KEYWORD = "keyword"
    STRING = "string"
    NUMBER = "number"
    COMMENT = "comment"


class Run(NamedTuple):
    """Half-open span ``[start, end)`` of a line with its category."""

    start: int
    end: int
    category: Category


@dataclass
class RuleSet:
    """Keywords and comment markers loaded from a rule file.

    Both lists keep their file order, and ``newline`` is the line ending the
    file was read with, so persisting writes the entries back as they were
    read.
    """

    keywords: list[str] = field(default_factory=list)
    comment_markers: list[str] = field(default_factory=list)
    newline: str = "\n"


class Runs:
    """Restartable view over the runs of one line."""

    def __init__(self, text: str, rules: Optional[RuleSet]) -> None:
        self._text = text
        self._rules = rules

    def __iter__(self) -> Iterator[Run]:
        if self._rules is None:
            if self._text:
                yield Run(0, len(self._text), Category.PLAIN)
            return

        pending: Optional[Run] = None
        for piece in _scan(self._text, self._rules):
            if (
                pending is not None
                and pending.category is Category.PLAIN
                and piece.category is Category.PLAIN
            ):
                pending = Run(pending.start, piece.end, Category.PLAIN)
                continue
            if pending is not None:
                yield pending
            pending = piece
        if pending is not None:
            yield pending

    def __repr__(self) -> str:
        return f"Runs({self._text!r})"


def _scan(text: str, rules: RuleSet) -> Iterator[Run]:
    keywords = set(rules.keywords)
    markers = [m for m in rules.comment_markers if m]
    length = len(text)
    i = 0
    while i < length:
        if any(text.startswith(marker, i) for marker in markers):
            yield Run(i, length, Category.COMMENT)
            return

        ch = text[i]
        start = i
        if ch == '"':
            i += 1
            while i < length and text[i] != '"':
                i += 1
            if i < length:
                i += 1
            yield Run(start, i, Category.STRING)
        elif ch in _DIGITS:
            while i < length and text[i] in _DIGITS:
                i += 1
            yield Run(start, i, Category.NUMBER)
        elif ch in _LETTERS:
            while i < length and text[i] in _ALNUM:
                i += 1
            word = text[start:i]
            yield Run(start, i, Category.KEYWORD if word in keywords else Category.PLAIN)
        else:
            i += 1
            yield Run(start, i, Category.PLAIN)


class Classifier:
    """Produces highlighting runs for a line of text.

    A Classifier without rules is disabled and reports every non-empty line
    as a single PLAIN run.
    """

    def __init__(self, rules: Optional[RuleSet] = None) -> None:
        self._rules = rules

    @property
    def enabled(self) -> bool:
        return self._rules is not None

    @property
    def rules(self) -> Optional[RuleSet]:
        return self._rules

    def set_rules(self, rules: Optional[RuleSet]) -> None:
        """Replace the rule set wholesale; ``None`` disables highlighting."""
        self._rules = rules
        if rules is None:
            logger.debug("Highlighting disabled.")
        else:
            logger.debug(
                "Highlighting enabled: %d keywords, %d comment markers.",
                len(rules.keywords),
                len(rules.comment_markers),
            )

    def classify(self, text: str) -> Runs:
        return Runs(text, self._rules)

    def segments(self, text: str) -> list[tuple[str, Category]]:
        """The runs of ``text`` as ``(substring, category)`` pairs."""
        return [(text[run.start : run.end], run.category) for run in self.classify(text)]
