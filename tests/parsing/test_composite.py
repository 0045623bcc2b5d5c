"""
Tests for the flag and named-pair tokenizers.
"""

from cmdtree.parsing.composite import (
    NamedToken,
    is_flag,
    iter_flags,
    iter_named_tokens,
    iter_words,
    scan_named,
    split_last_word,
)


class TestWords:
    def test_iter_words_offsets(self):
        assert list(iter_words(" ab  cd")) == [(1, "ab"), (5, "cd")]

    def test_split_last_word(self):
        assert split_last_word("-f --s") == ("-f ", "--s")
        assert split_last_word("-f ") == ("-f ", "")
        assert split_last_word("") == ("", "")


class TestNamed:
    """Test recognition of -key:value pairs."""

    def test_scan_named(self):
        assert scan_named("-amount:5") == ("amount", "5")
        assert scan_named("-a:b:c") == ("a", "b:c")

    def test_scan_named_rejects(self):
        assert scan_named("amount:5") is None
        assert scan_named("-amount:") is None
        assert scan_named("-:5") is None
        assert scan_named("-am-ount:5") is None
        assert scan_named("-ab") is None

    def test_iter_named_tokens_ignores_other_words(self):
        tokens = list(iter_named_tokens("-amount:5 junk -radius:10"))

        assert tokens == [
            NamedToken("amount", "5", 0),
            NamedToken("radius", "10", 15),
        ]


class TestFlags:
    """Test recognition of -x and --word flags."""

    def test_is_flag(self):
        assert is_flag("-f")
        assert is_flag("--silent")
        assert not is_flag("-")
        assert not is_flag("--")
        assert not is_flag("silent")
        assert not is_flag("-amount:5")

    def test_flags_must_be_whole_words(self):
        """Test that a flag embedded in another word is not found."""
        assert list(iter_flags("x-f --silent")) == ["--silent"]
