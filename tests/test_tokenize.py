"""
Tests for word and n-gram tokenization into tidy tables.
"""

from __future__ import annotations

import pandas as pd
import pytest

from usenet_text.features.tokenize import (
    count_words,
    separate_ngrams,
    tokenize_line,
    unnest_ngrams,
    unnest_words,
)

from conftest import DATA_CONFIG_PATH


def _lines(*texts: str) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "newsgroup": ["sci.space"] * len(texts),
            "id": [str(i) for i in range(len(texts))],
            "text": list(texts),
        }
    )


def test_tokenize_line_lowercases_and_keeps_apostrophes():
    assert tokenize_line("Don't PANIC, it's 3.5 km!") == ["don't", "panic", "it's", "3.5", "km"]


def test_tokenize_line_handles_missing_text():
    assert tokenize_line(None) == []
    assert tokenize_line("") == []


def test_unnest_words_filters_numbers_and_stopwords():
    df = _lines("Don't PANIC, it's 3.5 km!", "1993 was the year")
    words = unnest_words(df, stopwords={"it's", "the", "was"}, config_path=DATA_CONFIG_PATH)

    assert list(words.columns) == ["newsgroup", "id", "word"]
    assert words["word"].tolist() == ["don't", "panic", "km", "year"]
    assert words["id"].tolist() == ["0", "0", "0", "1"]


def test_unnest_words_can_keep_stopwords():
    df = _lines("the rocket")
    words = unnest_words(df, drop_stopwords=False, config_path=DATA_CONFIG_PATH)
    assert words["word"].tolist() == ["the", "rocket"]


def test_unnest_words_with_configured_stopwords():
    df = _lines("The rocket and the moon")
    words = unnest_words(df, config_path=DATA_CONFIG_PATH)
    assert words["word"].tolist() == ["rocket", "moon"]


def test_unnest_words_missing_column():
    with pytest.raises(KeyError):
        unnest_words(pd.DataFrame({"body": ["x"]}), config_path=DATA_CONFIG_PATH)


def test_unnest_ngrams_stays_within_lines():
    df = _lines("I do not like it", "short", "a b")
    bigrams = unnest_ngrams(df, n=2, config_path=DATA_CONFIG_PATH)

    assert bigrams["bigram"].tolist() == ["i do", "do not", "not like", "like it", "a b"]
    assert bigrams["id"].tolist() == ["0", "0", "0", "0", "2"]


def test_unnest_ngrams_trigrams():
    df = _lines("one two three four")
    grams = unnest_ngrams(df, n=3, output_col="trigram", config_path=DATA_CONFIG_PATH)
    assert grams["trigram"].tolist() == ["one two three", "two three four"]


def test_unnest_ngrams_rejects_non_positive_n():
    with pytest.raises(ValueError):
        unnest_ngrams(_lines("x y"), n=0, config_path=DATA_CONFIG_PATH)


def test_separate_ngrams():
    df = pd.DataFrame({"id": ["1", "1"], "bigram": ["not good", "don't like"]})
    out = separate_ngrams(df)

    assert list(out.columns) == ["id", "word1", "word2"]
    assert out["word1"].tolist() == ["not", "don't"]
    assert out["word2"].tolist() == ["good", "like"]


def test_separate_ngrams_empty():
    out = separate_ngrams(pd.DataFrame({"id": [], "bigram": []}))
    assert list(out.columns) == ["id", "word1", "word2"]
    assert out.empty


def test_count_words_by_group():
    words = pd.DataFrame(
        {
            "newsgroup": ["a", "a", "a", "b"],
            "word": ["rocket", "moon", "rocket", "rocket"],
        }
    )
    counts = count_words(words, by=["newsgroup"])

    assert list(counts.columns) == ["newsgroup", "word", "n"]
    assert counts.iloc[0].tolist() == ["a", "rocket", 2]
    assert set(map(tuple, counts.values.tolist())) == {
        ("a", "rocket", 2),
        ("a", "moon", 1),
        ("b", "rocket", 1),
    }
