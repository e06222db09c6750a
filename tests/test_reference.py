"""Tests for reference data parsing and loading."""

import tempfile
import urllib.error
from pathlib import Path
from unittest.mock import patch

import pytest

from homework.models import VocabularyEntry
from homework.reference import (
    DEFAULT_REFERENCE_DIR,
    LOAD_ERROR_MESSAGE,
    NOT_LOADED_MESSAGE,
    ReferenceLoadError,
    collation_key,
    fetch_text,
    load_references,
    parse_verbs_csv,
    parse_words_csv,
    split_fields,
)


class TestSplitFields:
    """Tests for the line tokenizer."""

    def test_bare_fields_are_trimmed(self):
        assert split_fields(" a , b ,c ") == ["a", "b", "c"]

    def test_quoted_field_keeps_commas(self):
        assert split_fields('word,Section,"one, two"') == ["word", "Section", "one, two"]

    def test_empty_fields(self):
        """Test leading, inner and trailing empty fields."""
        assert split_fields(",a,,b,") == ["", "a", "", "b", ""]

    def test_text_after_closing_quote_is_dropped(self):
        assert split_fields('"abc"def,x') == ["abc", "x"]

    def test_unterminated_quote_is_bare(self):
        assert split_fields('a,"open, rest') == ["a", '"open', "rest"]

    def test_quote_after_whitespace_is_literal(self):
        """Test that a quote only opens a span at the very start of a field."""
        assert split_fields('a, "b,c"') == ["a", '"b', 'c"']

    def test_empty_quoted_field(self):
        assert split_fields('"",x') == ["", "x"]

    def test_carriage_return_trimmed(self):
        assert split_fields("a,b,c\r") == ["a", "b", "c"]


class TestParseWordsCSV:
    """Tests for parse_words_csv."""

    def test_definition_with_unquoted_commas(self):
        """Test that extra fields are joined back into the definition."""
        result = parse_words_csv("word,SectionA,def one, part two\n")
        assert result == {"SectionA": [VocabularyEntry(word="word", definition="def one, part two")]}

    def test_two_field_line_is_dropped(self):
        assert parse_words_csv("onlyword,SectionA") == {}

    def test_header_skipped(self):
        """Test that a header containing the marker is skipped."""
        text = "Palabra,Sección,Definición\nrun,Verbs,move fast\n"
        assert parse_words_csv(text) == {"Verbs": [VocabularyEntry("run", "move fast")]}

    def test_first_line_kept_without_marker(self):
        text = "word,section,definition\nrun,Verbs,move fast\n"
        result = parse_words_csv(text)
        assert list(result) == ["section", "Verbs"]

    def test_sections_and_entries_keep_source_order(self):
        text = "\n".join(
            [
                "b1,Beta,x",
                "a1,Alpha,y",
                "b2,Beta,z",
            ]
        )
        result = parse_words_csv(text)
        assert list(result) == ["Beta", "Alpha"]
        assert [e.word for e in result["Beta"]] == ["b1", "b2"]

    def test_blank_lines_ignored(self):
        text = "\n\n  \nrun,Verbs,move\r\n\n"
        assert parse_words_csv(text) == {"Verbs": [VocabularyEntry("run", "move")]}

    def test_empty_first_definition_field(self):
        """Test that a leading ', ' left by the join is removed."""
        assert parse_words_csv("run,Verbs,,move fast") == {"Verbs": [VocabularyEntry("run", "move fast")]}

    def test_quoted_definition(self):
        result = parse_words_csv('give up,Phrasal Verbs,"stop trying, abandon"')
        assert result["Phrasal Verbs"][0].definition == "stop trying, abandon"

    def test_empty_input(self):
        assert parse_words_csv("") == {}

    def test_bundled_words_file(self):
        """Test that the bundled word list parses."""
        text = (DEFAULT_REFERENCE_DIR / "words.csv").read_text(encoding="utf-8")
        result = parse_words_csv(text)
        assert "Phrasal Verbs" in result
        assert result["Phrasal Verbs"][1] == VocabularyEntry("give up", "stop trying, abandon an effort")


class TestParseVerbsCSV:
    """Tests for parse_verbs_csv."""

    def test_sorted_locale_style(self):
        assert parse_verbs_csv("run,\nBe\napply,\n") == ["apply", "Be", "run"]

    def test_header_skipped(self):
        assert parse_verbs_csv("Verbs,\nrun,\nhide,") == ["hide", "run"]

    def test_only_one_trailing_comma_stripped(self):
        assert parse_verbs_csv("run,,\n") == ["run,"]

    def test_empty_entries_discarded(self):
        assert parse_verbs_csv("go\n,\n  ,  \n") == ["go"]

    def test_duplicates_kept(self):
        assert parse_verbs_csv("go\ngo,") == ["go", "go"]

    def test_empty_input(self):
        assert parse_verbs_csv("") == []

    def test_collation_lowercase_first_and_accents(self):
        """Test case and accent ties."""
        assert sorted(["Apple", "apple", "éclair", "eat"], key=collation_key) == [
            "apple",
            "Apple",
            "eat",
            "éclair",
        ]

    def test_pure(self):
        text = "b,\na,\n"
        assert parse_verbs_csv(text) == parse_verbs_csv(text)


class TestLoading:
    """Tests for fetching and loading the reference sources."""

    @pytest.fixture
    def ref_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir)
            (path / "words.csv").write_text("palabra,sección,def\nrun,Verbs,move fast\n", encoding="utf-8")
            (path / "verbs.csv").write_text("verb,\nrun,\napply,\n", encoding="utf-8")
            yield path

    def test_fetch_relative_path(self, ref_dir):
        assert fetch_text("verbs.csv", ref_dir).startswith("verb,")

    def test_fetch_file_url(self, ref_dir):
        assert fetch_text((ref_dir / "verbs.csv").as_uri()).startswith("verb,")

    def test_fetch_missing(self, ref_dir):
        with pytest.raises(ReferenceLoadError):
            fetch_text("missing.csv", ref_dir)

    def test_fetch_missing_file_url(self, ref_dir):
        with pytest.raises(ReferenceLoadError):
            fetch_text((ref_dir / "missing.csv").as_uri())

    def test_missing_file_url_same_message_as_missing_path(self, ref_dir):
        """Test that both kinds of missing source show the not-loaded message."""
        data = load_references((ref_dir / "missing.csv").as_uri(), "missing.csv", ref_dir)
        assert data.words_error == NOT_LOADED_MESSAGE
        assert data.verbs_error == NOT_LOADED_MESSAGE

    def test_network_error_is_load_error(self, ref_dir):
        """Test that an unreachable http source gets the generic message."""
        error = urllib.error.URLError("connection refused")
        with patch("homework.reference.urllib.request.urlopen", side_effect=error):
            data = load_references("http://example.invalid/words.csv", "verbs.csv", ref_dir)
        assert data.words_error == LOAD_ERROR_MESSAGE
        assert data.verbs == ["apply", "run"]

    def test_load_both(self, ref_dir):
        data = load_references("words.csv", "verbs.csv", ref_dir)
        assert data.words == {"Verbs": [VocabularyEntry("run", "move fast")]}
        assert data.verbs == ["apply", "run"]
        assert data.words_error is None
        assert data.verbs_error is None

    def test_words_failure_does_not_block_verbs(self, ref_dir):
        data = load_references("missing.csv", "verbs.csv", ref_dir)
        assert data.words is None
        assert data.words_error == NOT_LOADED_MESSAGE
        assert data.verbs == ["apply", "run"]

    def test_verbs_failure_does_not_block_words(self, ref_dir):
        data = load_references("words.csv", "missing.csv", ref_dir)
        assert data.verbs_error == NOT_LOADED_MESSAGE
        assert data.words is not None

    def test_unexpected_error_message(self, ref_dir):
        """Test that errors other than a failed response get the generic message."""
        with patch("homework.reference.fetch_text", side_effect=OSError("network down")):
            data = load_references("words.csv", "verbs.csv", ref_dir)
        assert data.words_error == LOAD_ERROR_MESSAGE
        assert data.verbs_error == LOAD_ERROR_MESSAGE

    def test_bundled_defaults(self):
        data = load_references("words.csv", "verbs.csv")
        assert data.words and data.verbs
        assert data.verbs[0] == "Admit"
