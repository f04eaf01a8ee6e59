import pytest

from declutter.engine.similarity import bigrams, similarity, strip_whitespace


@pytest.mark.parametrize("text", ["a", "ab", "hello", "Kappa Kappa", "😀 hi"])
def test_similarity_identical_is_one(text: str) -> None:
    assert similarity(text, text) == 1.0


@pytest.mark.parametrize(
    ("first", "second"),
    [
        ("hello world", "hello wrld"),
        ("night", "nacht"),
        ("aaaa", "aa"),
        ("abc", "x"),
        ("", "spam"),
        ("LUL LUL LUL", "LULW"),
    ],
)
def test_similarity_is_symmetric(first: str, second: str) -> None:
    assert similarity(first, second) == similarity(second, first)


def test_similarity_empty_and_single_char_edges() -> None:
    assert similarity("", "") == 1.0
    assert similarity("", "x") == 0.0
    assert similarity("x", "") == 0.0
    assert similarity("a", "a") == 1.0
    assert similarity("a", "b") == 0.0
    assert similarity("ab", "a") == 0.0


def test_similarity_reference_value() -> None:
    assert similarity("night", "nacht") == pytest.approx(0.25)
    assert similarity("hello", "hallo") == pytest.approx(0.5)


def test_similarity_ignores_whitespace() -> None:
    assert similarity("a b c", "abc") == 1.0
    assert similarity("  \t\n", "") == 1.0
    assert similarity("buy  now\n", "buynow") == 1.0


def test_similarity_counts_repeated_bigrams_as_multiset() -> None:
    # "aaaa" has three "aa" bigrams, "aa" only one: one shared occurrence
    assert similarity("aaaa", "aa") == pytest.approx(0.5)


def test_similarity_uses_code_points() -> None:
    assert similarity("😀😀😀", "😀😀") == pytest.approx(2 / 3)


def test_similarity_treats_non_strings_as_empty() -> None:
    assert similarity(None, "") == 1.0
    assert similarity(None, "x") == 0.0
    assert similarity(42, None) == 1.0


def test_bigram_and_strip_helpers() -> None:
    assert strip_whitespace(" a\tb ") == "ab"
    assert strip_whitespace(None) == ""
    assert bigrams("abab") == {"ab": 2, "ba": 1}
    assert bigrams("a") == {}
