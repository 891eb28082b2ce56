"""
Tests for the exploratory analyses: newsgroup correlation, topic models,
and lexicon-based sentiment.
"""

from __future__ import annotations

import pandas as pd
import pytest

from usenet_text.analysis.correlation import pairwise_correlation, words_by_newsgroup
from usenet_text.analysis.sentiment import (
    get_message_text,
    load_sentiment_lexicon,
    message_sentiment,
    negated_words,
    newsgroup_sentiment,
    read_lexicon_file,
    top_sentiment_words,
    word_contributions,
)
from usenet_text.analysis.topics import (
    fit_topic_model,
    load_topic_model,
    message_documents,
    save_topic_model,
    top_terms_per_topic,
)


# ---------------------------------------------------------------------------
# Correlation
# ---------------------------------------------------------------------------


def test_words_by_newsgroup():
    words = pd.DataFrame(
        {"newsgroup": ["a", "a", "b"], "id": ["1", "2", "3"], "word": ["x", "x", "y"]}
    )
    counts = words_by_newsgroup(words)
    assert counts.values.tolist() == [["a", "x", 2], ["b", "y", 1]]


def test_pairwise_correlation():
    counts = pd.DataFrame(
        {
            "newsgroup": ["g1"] * 3 + ["g2"] * 3 + ["g3"] * 3,
            "word": ["x", "y", "z"] * 3,
            "n": [1, 2, 3, 2, 4, 6, 3, 2, 1],
        }
    )
    cors = pairwise_correlation(counts)

    assert list(cors.columns) == ["item1", "item2", "correlation"]
    assert len(cors) == 6
    assert not (cors["item1"] == cors["item2"]).any()

    assert cors.iloc[0]["correlation"] == pytest.approx(1.0)
    assert {cors.iloc[0]["item1"], cors.iloc[0]["item2"]} == {"g1", "g2"}
    assert cors.iloc[-1]["correlation"] == pytest.approx(-1.0)


def test_pairwise_correlation_treats_missing_as_zero():
    counts = pd.DataFrame(
        {"newsgroup": ["a", "a", "b"], "word": ["x", "y", "x"], "n": [1, 0, 1]}
    )
    cors = pairwise_correlation(counts)
    assert cors["correlation"].tolist() == pytest.approx([1.0, 1.0])


def test_pairwise_correlation_single_item():
    counts = pd.DataFrame({"newsgroup": ["a"], "word": ["x"], "n": [1]})
    assert pairwise_correlation(counts).empty


# ---------------------------------------------------------------------------
# Topics
# ---------------------------------------------------------------------------


def _topic_counts() -> pd.DataFrame:
    rows = []
    for doc, vocab in {
        "sci.space_1": ["rocket", "orbit", "launch"],
        "sci.space_2": ["orbit", "launch", "moon"],
        "sci.med_1": ["doctor", "patient", "drug"],
        "sci.med_2": ["patient", "drug", "clinic"],
    }.items():
        for word in vocab:
            rows.append((doc, word, 5))
    return pd.DataFrame(rows, columns=["document", "word", "n"])


def test_fit_topic_model_returns_normalized_tables():
    model, beta, gamma = fit_topic_model(_topic_counts(), n_topics=2, random_state=0)

    assert list(beta.columns) == ["topic", "term", "beta"]
    assert list(gamma.columns) == ["document", "topic", "gamma"]
    assert set(beta["topic"]) == {1, 2}

    for total in beta.groupby("topic")["beta"].sum():
        assert total == pytest.approx(1.0)
    for total in gamma.groupby("document")["gamma"].sum():
        assert total == pytest.approx(1.0)

    assert model.n_components == 2


def test_fit_topic_model_rejects_empty_counts():
    with pytest.raises(ValueError):
        fit_topic_model(_topic_counts().iloc[0:0])


def test_top_terms_per_topic():
    _, beta, _ = fit_topic_model(_topic_counts(), n_topics=2, random_state=0)
    top = top_terms_per_topic(beta, n=2)

    assert len(top) == 4
    assert top.groupby("topic").size().tolist() == [2, 2]


def test_save_and_load_topic_model(tmp_path):
    model, _, _ = fit_topic_model(_topic_counts(), n_topics=2, random_state=0)
    path = save_topic_model(model, str(tmp_path / "models"))

    loaded = load_topic_model(str(tmp_path / "models"))
    assert path.endswith(".joblib")
    assert loaded.n_components == model.n_components

    with pytest.raises(FileNotFoundError):
        load_topic_model(str(tmp_path / "nowhere"))


def test_message_documents_filters_by_prefix():
    words = pd.DataFrame(
        {
            "newsgroup": ["sci.space", "sci.space", "rec.autos"],
            "id": ["1", "1", "2"],
            "word": ["orbit", "orbit", "engine"],
        }
    )
    counts = message_documents(words, newsgroup_prefix="sci.")
    assert counts.values.tolist() == [["sci.space_1", "orbit", 2]]


# ---------------------------------------------------------------------------
# Sentiment
# ---------------------------------------------------------------------------


def _word_counts() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "newsgroup": ["a", "a", "a", "b"],
            "word": ["great", "bad", "car", "bad"],
            "n": [2, 1, 5, 2],
        }
    )


def test_newsgroup_sentiment(lexicon):
    result = newsgroup_sentiment(_word_counts(), lexicon)

    assert result["newsgroup"].tolist() == ["b", "a"]
    assert result["value"].tolist() == pytest.approx([-3.0, 1.0])


def test_top_sentiment_words(lexicon):
    result = top_sentiment_words(_word_counts(), lexicon)

    assert result[["newsgroup", "word"]].values.tolist() == [
        ["b", "bad"],
        ["a", "great"],
        ["a", "bad"],
    ]
    # Newsgroup "a" totals 8 words, including "car", which has no score.
    assert result["contribution"].tolist() == pytest.approx([-3.0, 0.75, -0.375])


def test_word_contributions(lexicon):
    words = pd.DataFrame({"word": ["great", "great", "bad", "car"]})
    result = word_contributions(words, lexicon)

    assert result["word"].tolist() == ["great", "bad"]
    assert result["occurrences"].tolist() == [2, 1]
    assert result["contribution"].tolist() == pytest.approx([6.0, -3.0])


def test_message_sentiment(lexicon):
    words = pd.DataFrame(
        {
            "newsgroup": ["a", "a", "a", "b"],
            "id": ["1", "1", "1", "2"],
            "word": ["great", "bad", "great", "bad"],
        }
    )
    all_messages = message_sentiment(words, lexicon)
    assert all_messages[["newsgroup", "id"]].values.tolist() == [["a", "1"], ["b", "2"]]
    assert all_messages["sentiment"].tolist() == pytest.approx([1.0, -3.0])
    assert all_messages["words"].tolist() == [3, 1]

    filtered = message_sentiment(words, lexicon, min_words=2)
    assert filtered["id"].tolist() == ["1"]


def test_negated_words(lexicon):
    bigrams = pd.DataFrame(
        {
            "word1": ["not", "not", "no", "very", "don't"],
            "word2": ["good", "good", "bad", "good", "like"],
        }
    )
    result = negated_words(bigrams, lexicon)

    assert list(result.columns) == ["word1", "word2", "value", "n", "contribution"]
    assert result[["word1", "word2"]].values.tolist() == [
        ["not", "good"],
        ["no", "bad"],
        ["don't", "like"],
    ]
    assert result["n"].tolist() == [2, 1, 1]
    assert result["contribution"].tolist() == pytest.approx([6.0, -3.0, 2.0])


def test_get_message_text():
    cleaned = pd.DataFrame(
        {"newsgroup": ["a", "a", "b"], "id": ["1", "1", "1"], "text": ["x", "y", "z"]}
    )
    assert get_message_text(cleaned, "a", "1") == ["x", "y"]
    assert get_message_text(cleaned, "b", 1) == ["z"]

    with pytest.raises(KeyError):
        get_message_text(cleaned, "c", "1")


def test_read_lexicon_file(tmp_path):
    path = tmp_path / "afinn.txt"
    path.write_text("abandon\t-2\nGood\t3\ncan't stand\t-3\n", encoding="utf-8")

    lexicon = read_lexicon_file(str(path))
    assert lexicon["word"].tolist() == ["abandon", "Good", "can't stand"]
    assert lexicon["value"].tolist() == [-2.0, 3.0, -3.0]

    loaded = load_sentiment_lexicon(path=str(path))
    assert "good" in set(loaded["word"])


def test_load_sentiment_lexicon_unknown_name():
    with pytest.raises(ValueError):
        load_sentiment_lexicon(name="nope")


def test_read_lexicon_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_lexicon_file(str(tmp_path / "missing.txt"))


def test_load_sentiment_lexicon_vader():
    pytest.importorskip("nltk.sentiment.vader")
    try:
        lexicon = load_sentiment_lexicon("vader")
    except LookupError:
        pytest.skip("VADER lexicon not available offline")

    assert list(lexicon.columns) == ["word", "value"]
    assert (lexicon["word"] == lexicon["word"].str.lower()).all()
    assert lexicon["word"].is_unique
    assert lexicon.set_index("word").loc["good", "value"] > 0
