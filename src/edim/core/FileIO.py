# edim/core/FileIO.py
"""edim.core.FileIO
===================

Reading and writing documents and highlight rule files.

Documents are plain text split on ``\\n``. One trailing ``\\n`` is removed
per line; a ``\\r`` in front of it stays part of the line. When saving, every
line is written followed by exactly one ``\\n``.

The input encoding is detected with ``chardet`` on a 20 KiB sample, the same
way for every document:

    1. the detected encoding, strictly, when the confidence is >= 0.75;
    2. ``utf-8``, strictly;
    3. ``latin-1``, strictly;
    4. ``utf-8`` with replacement characters.

Rule files hold two sections::

    [keywords]
    if
    while
    [comments]
    //
    #

A line that is exactly ``[keywords]`` or ``[comments]`` starts a section.
Following lines are entries until a line beginning with ``[``. Empty lines are
skipped and lines outside any section are ignored. A rule file is written back
with the line ending and the raw bytes it was read with.
"""

import logging
from typing import Iterable, NamedTuple, Optional

import chardet

from edim.core.Buffer import Buffer
from edim.core.Classifier import RuleSet
from edim.core.errors import ConfigOpenError, FileWriteError
from edim.core.Line import Line

logger = logging.getLogger("edim.fileio")

CHARDET_SAMPLE_SIZE = 1024 * 20
CHARDET_MIN_CONFIDENCE = 0.75

KEYWORDS_HEADER = "[keywords]"
COMMENTS_HEADER = "[comments]"


class Document(NamedTuple):
    buffer: Buffer
    encoding: str
    is_new: bool


def split_document(content: str) -> list[str]:
    """Split raw file content into line texts without their ``\\n``."""
    texts = content.split("\n")
    if len(texts) > 1 and texts[-1] == "":
        texts.pop()
    return texts


def _candidate_encodings(sample: bytes) -> list[tuple[str, str]]:
    result = chardet.detect(sample)
    guess = result.get("encoding")
    confidence = result.get("confidence") or 0.0
    logger.debug("chardet guessed %r with confidence %.2f", guess, confidence)

    candidates: list[tuple[str, str]] = []
    if guess and confidence >= CHARDET_MIN_CONFIDENCE:
        # ascii decodes as utf-8 and stays writable after non-ASCII edits
        if guess.lower() == "ascii":
            guess = "utf-8"
        candidates.append((guess, "strict"))
    for fallback in (("utf-8", "strict"), ("latin-1", "strict"), ("utf-8", "replace")):
        if fallback not in candidates:
            candidates.append(fallback)
    return candidates


def read_document(path: str, encoding: Optional[str] = None) -> Document:
    """Load ``path`` into a Buffer.

    A missing file is not an error: it produces one empty Line and
    ``is_new=True``. Any other ``OSError`` propagates to the caller.

    Args:
        path: File to read.
        encoding: Skip detection and decode strictly with this encoding.
    """
    try:
        with open(path, "rb") as f_binary:
            raw = f_binary.read()
    except FileNotFoundError:
        logger.info("'%s' does not exist yet; starting a new document.", path)
        buffer = Buffer()
        buffer.is_new = True
        return Document(buffer, encoding or "utf-8", True)

    if not raw:
        logger.info("'%s' is empty.", path)
        return Document(Buffer(), encoding or "utf-8", False)

    candidates = [(encoding, "strict")] if encoding else _candidate_encodings(
        raw[:CHARDET_SAMPLE_SIZE]
    )
    for enc, errors in candidates:
        try:
            content = raw.decode(enc, errors=errors)
        except (UnicodeDecodeError, LookupError) as e:
            logger.warning("Failed to decode '%s' as %s (errors=%s): %s", path, enc, errors, e)
            continue
        buffer = Buffer(Line(text) for text in split_document(content))
        logger.info(
            "Read '%s' using %s (errors=%s): %d lines.", path, enc, errors, buffer.line_count
        )
        return Document(buffer, enc, False)

    # Only reachable with an explicit encoding that cannot decode the file.
    raise UnicodeDecodeError(encoding or "utf-8", raw, 0, len(raw), "could not decode document")


def write_document(buffer: Buffer, path: str, encoding: str = "utf-8") -> None:
    """Write each Line of ``buffer`` followed by ``\\n``.

    Raises:
        FileWriteError: the file could not be opened or written.
    """
    try:
        with open(path, "w", encoding=encoding, errors="replace", newline="\n") as f:
            for line in buffer:
                f.write(line.text)
                f.write("\n")
    except (OSError, LookupError) as e:
        logger.error("Could not write '%s': %s", path, e)
        raise FileWriteError(path, str(e)) from e
    logger.info("Wrote %d lines to '%s' (%s).", buffer.line_count, path, encoding)


def _strip_terminator(raw_line: str, newline: str) -> str:
    if raw_line.endswith(newline):
        return raw_line[: -len(newline)]
    if raw_line.endswith("\n"):
        return raw_line[:-1]
    return raw_line


def parse_rules(lines: Iterable[str]) -> RuleSet:
    """Build a RuleSet from the lines of a rule file.

    The first line terminator seen (``\\n`` or ``\\r\\n``) becomes the
    file's line ending and is stripped from every line; any other ``\\r``
    stays part of the entry. A repeated header starts its list over, so the
    last section of each kind wins.
    """
    rules = RuleSet()
    newline: Optional[str] = None
    section: Optional[list[str]] = None
    for raw_line in lines:
        if newline is None and raw_line.endswith("\n"):
            newline = "\r\n" if raw_line.endswith("\r\n") else "\n"
            rules.newline = newline
        text = _strip_terminator(raw_line, rules.newline)
        if text.startswith("["):
            if text == KEYWORDS_HEADER:
                rules.keywords = []
                section = rules.keywords
            elif text == COMMENTS_HEADER:
                rules.comment_markers = []
                section = rules.comment_markers
            else:
                logger.debug("Unknown section %r; ignoring its entries.", text)
                section = None
            continue
        if section is None or not text:
            continue
        section.append(text)
    return rules


def load_rules(path: str) -> RuleSet:
    """Read a rule file.

    Bytes that are not valid UTF-8 are kept as surrogate escapes so that
    :func:`save_rules` writes them back unchanged.

    Raises:
        ConfigOpenError: the file could not be opened.
    """
    try:
        with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            rules = parse_rules(f)
    except OSError as e:
        logger.warning("Could not open rule file '%s': %s", path, e)
        raise ConfigOpenError(path, str(e)) from e
    logger.info(
        "Loaded rules from '%s': %d keywords, %d comment markers.",
        path,
        len(rules.keywords),
        len(rules.comment_markers),
    )
    return rules


def dump_rules(rules: RuleSet) -> str:
    parts = [KEYWORDS_HEADER, *rules.keywords, COMMENTS_HEADER, *rules.comment_markers]
    return "".join(f"{part}{rules.newline}" for part in parts)


def save_rules(rules: RuleSet, path: str) -> None:
    """Persist ``rules`` to ``path`` in the rule-file format.

    Raises:
        FileWriteError: the file could not be written.
    """
    try:
        with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(dump_rules(rules))
    except OSError as e:
        logger.error("Could not persist rules to '%s': %s", path, e)
        raise FileWriteError(path, str(e)) from e
    logger.debug("Persisted rules to '%s'.", path)
