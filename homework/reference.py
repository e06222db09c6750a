"""Reference data: parsing and loading of the word and verb lists.

The parsers are pure functions of their input text. They never raise on
malformed rows; a row either becomes a well-formed entry or is dropped.

Quoted fields have no escape mechanism. A quoted span ends at the very
next double quote, and whatever follows it up to the next comma is
discarded, so a literal quote cannot appear inside a quoted field.
"""

import logging
import unicodedata
import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from homework.models import VocabularyEntry

logger = logging.getLogger(__name__)

WORDS_HEADER_MARKER = "palabra"
VERBS_HEADER_MARKER = "verb"

DEFAULT_REFERENCE_DIR = Path(__file__).parent / "data"
FETCH_TIMEOUT = 10.0

NOT_LOADED_MESSAGE = "No se pudo cargar."
LOAD_ERROR_MESSAGE = "Error cargando."

VocabularySections = Dict[str, List[VocabularyEntry]]


class ReferenceLoadError(Exception):
    """A reference source could not be read (missing or non-success response)."""


class _State(Enum):
    FIELD_START = "field-start"
    IN_QUOTES = "in-quotes"
    IN_BARE_FIELD = "in-bare-field"
    AFTER_QUOTES = "after-quotes"


def split_fields(line: str) -> List[str]:
    """Split one line into trimmed fields.

    A field starting with a double quote runs to the next double quote.
    Any other field runs to the next comma. An unterminated quote is read
    as part of a bare field.
    """
    fields: List[str] = []
    buf: List[str] = []
    state = _State.FIELD_START
    i = 0

    while i < len(line):
        ch = line[i]
        if state is _State.FIELD_START:
            if ch == '"':
                if '"' in line[i + 1:]:
                    state = _State.IN_QUOTES
                else:
                    buf.append(ch)
                    state = _State.IN_BARE_FIELD
            elif ch == ",":
                fields.append("")
            else:
                buf.append(ch)
                state = _State.IN_BARE_FIELD
        elif state is _State.IN_QUOTES:
            if ch == '"':
                state = _State.AFTER_QUOTES
            else:
                buf.append(ch)
        elif ch == ",":
            fields.append("".join(buf).strip())
            buf = []
            state = _State.FIELD_START
        elif state is _State.IN_BARE_FIELD:
            buf.append(ch)
        # AFTER_QUOTES: trailing text is dropped
        i += 1

    fields.append("".join(buf).strip())
    return fields


def _non_blank_lines(text: str) -> List[str]:
    return [line for line in text.split("\n") if line.strip()]


def _skip_header(lines: List[str], marker: str) -> List[str]:
    if lines and marker in lines[0].lower():
        return lines[1:]
    return lines


def parse_words_csv(text: str) -> VocabularySections:
    """Parse the word list into vocabulary sections.

    Each row is ``word, section, definition...``. Definition fields after
    the second are joined back with ", ". Rows with fewer than three fields
    are dropped.

    Args:
        text: Raw contents of the word-list file

    Returns:
        Mapping of section name to entries, both in source order
    """
    sections: VocabularySections = {}
    lines = _skip_header(_non_blank_lines(text), WORDS_HEADER_MARKER)

    for line in lines:
        fields = split_fields(line)
        if len(fields) < 3:
            continue

        word, section = fields[0], fields[1]
        definition = ", ".join(fields[2:])
        if definition.startswith(", "):
            definition = definition[2:]
        sections.setdefault(section, []).append(VocabularyEntry(word=word, definition=definition))

    return sections


def collation_key(value: str) -> Tuple[str, str, Tuple[bool, ...]]:
    """Sort key approximating locale-aware comparison.

    Compares ignoring accents and case first, then accents, then case
    with lowercase ordered before uppercase.
    """
    folded = value.casefold()
    decomposed = unicodedata.normalize("NFD", folded)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base, folded, tuple(ch.isupper() for ch in value)


def parse_verbs_csv(text: str) -> List[str]:
    """Parse the verb list.

    One verb per line; a single trailing comma is tolerated.

    Args:
        text: Raw contents of the verb-list file

    Returns:
        Verbs sorted in locale-style ascending order
    """
    verbs = []
    for line in _skip_header(_non_blank_lines(text), VERBS_HEADER_MARKER):
        line = line.rstrip()
        if line.endswith(","):
            line = line[:-1]
        verb = line.strip()
        if verb:
            verbs.append(verb)
    return sorted(verbs, key=collation_key)


def fetch_text(source: str, base: Union[str, Path, None] = None) -> str:
    """Read a reference source.

    Args:
        source: An http(s):// or file:// URL, or a filesystem path
        base: Directory that relative paths are resolved against

    Returns:
        The decoded text

    Raises:
        ReferenceLoadError: If the source is missing or the response is
            not successful
    """
    if source.startswith(("http://", "https://", "file://")):
        try:
            with urllib.request.urlopen(source, timeout=FETCH_TIMEOUT) as response:
                status = getattr(response, "status", None)
                if status is not None and status != 200:
                    raise ReferenceLoadError(f"{source} answered with status {status}")
                return response.read().decode("utf-8-sig")
        except urllib.error.HTTPError as exc:
            raise ReferenceLoadError(f"{source} answered with status {exc.code}") from exc
        except urllib.error.URLError as exc:
            # Network failures stay errors; a missing local file is "not found"
            if source.startswith("file://"):
                raise ReferenceLoadError(f"{source} does not exist") from exc
            raise

    path = Path(source).expanduser()
    if not path.is_absolute():
        path = Path(base or DEFAULT_REFERENCE_DIR) / path
    if not path.is_file():
        raise ReferenceLoadError(f"{path} does not exist")
    return path.read_text(encoding="utf-8-sig")


@dataclass
class ReferenceData:
    """Both reference lists, each loaded or failed on its own."""

    words: Optional[VocabularySections] = None
    verbs: Optional[List[str]] = None
    words_error: Optional[str] = None
    verbs_error: Optional[str] = None


def _load_one(source: str, base, parser):
    try:
        return parser(fetch_text(source, base)), None
    except ReferenceLoadError as exc:
        logger.warning("Reference not loaded: %s", exc)
        return None, NOT_LOADED_MESSAGE
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        logger.error("Data load error for %s: %s", source, exc)
        return None, LOAD_ERROR_MESSAGE


def load_references(
    words_source: str,
    verbs_source: str,
    base: Union[str, Path, None] = None,
) -> ReferenceData:
    """Load the word and verb lists concurrently.

    A failure in one list never affects the other.

    Args:
        words_source: Word-list source (URL or path)
        verbs_source: Verb-list source (URL or path)
        base: Directory that relative paths are resolved against

    Returns:
        ReferenceData with parsed lists or per-list error messages
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        words_future = pool.submit(_load_one, words_source, base, parse_words_csv)
        verbs_future = pool.submit(_load_one, verbs_source, base, parse_verbs_csv)
        words, words_error = words_future.result()
        verbs, verbs_error = verbs_future.result()

    return ReferenceData(words=words, verbs=verbs, words_error=words_error, verbs_error=verbs_error)
