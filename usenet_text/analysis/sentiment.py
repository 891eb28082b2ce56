"""
Lexicon-based sentiment analysis over tidy Usenet tables.

A sentiment lexicon is a two-column table (word, value) mapping words to a
polarity score. We support:

- "vader": NLTK's VADER lexicon (scores roughly in [-4, 4])
- a path to an AFINN-style tab-separated file ("word<TAB>score")

All scoring is a join of a tidy word table against the lexicon followed
by grouping and aggregation:

- `newsgroup_sentiment`  : average score of lexicon words per newsgroup
- `word_contributions`   : which words drive sentiment overall
- `top_sentiment_words`  : per-newsgroup contribution of each word
- `message_sentiment`    : average score per message
- `negated_words`        : words preceded by a negation ("not good")
"""

from __future__ import annotations

import csv
import logging
import os
from typing import Iterable, List, Optional

import nltk
import pandas as pd


DEFAULT_NEGATION_WORDS = ("not", "without", "no", "can't", "don't", "won't")

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lexicons
# ---------------------------------------------------------------------------


def ensure_vader_lexicon() -> None:
    """Ensure the VADER lexicon is downloaded."""
    try:
        nltk.data.find("sentiment/vader_lexicon.zip")
    except LookupError:
        nltk.download("vader_lexicon", quiet=True)


def _load_vader_lexicon() -> pd.DataFrame:
    from nltk.sentiment.vader import SentimentIntensityAnalyzer

    ensure_vader_lexicon()
    lexicon = SentimentIntensityAnalyzer().lexicon
    return pd.DataFrame(
        {"word": list(lexicon.keys()), "value": [float(v) for v in lexicon.values()]}
    )


def read_lexicon_file(path: str) -> pd.DataFrame:
    """
    Read an AFINN-style lexicon: one "word<TAB>score" pair per line.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file holds no entries.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Lexicon file not found: {path}")

    lexicon = pd.read_csv(
        path,
        sep="\t",
        header=None,
        names=["word", "value"],
        dtype={"word": str},
        quoting=csv.QUOTE_NONE,
        keep_default_na=False,
        encoding="utf-8",
    )
    if lexicon.empty:
        raise ValueError(f"Lexicon file is empty: {path}")

    lexicon["value"] = pd.to_numeric(lexicon["value"], errors="raise").astype(float)
    return lexicon


def load_sentiment_lexicon(name: str = "vader", path: Optional[str] = None) -> pd.DataFrame:
    """
    Load a sentiment lexicon as a DataFrame with columns ["word", "value"].

    Parameters
    ----------
    name : str
        "vader" for NLTK's VADER lexicon, or "file" to read `path`.
    path : Optional[str]
        Path to an AFINN-style lexicon file; when given, it takes
        precedence over `name`.

    Returns
    -------
    pd.DataFrame
        Lexicon with lowercase, unique words.
    """
    if path:
        lexicon = read_lexicon_file(path)
    elif (name or "").lower() == "vader":
        lexicon = _load_vader_lexicon()
    else:
        raise ValueError(f"Unknown sentiment lexicon: {name!r} (expected 'vader' or a file path)")

    lexicon["word"] = lexicon["word"].str.lower()
    lexicon = lexicon.drop_duplicates(subset=["word"], keep="first").reset_index(drop=True)
    logger.info("Loaded sentiment lexicon with %d words", len(lexicon))
    return lexicon


def _join_lexicon(
    df: pd.DataFrame,
    lexicon: pd.DataFrame,
    word_col: str = "word",
) -> pd.DataFrame:
    if word_col not in df.columns:
        raise KeyError(
            f"Column '{word_col}' not found in DataFrame. "
            f"Available columns: {list(df.columns)}"
        )
    return df.merge(lexicon, how="inner", left_on=word_col, right_on="word", suffixes=("", "_lex"))


# ---------------------------------------------------------------------------
# Aggregate sentiment
# ---------------------------------------------------------------------------


def newsgroup_sentiment(word_counts: pd.DataFrame, lexicon: pd.DataFrame) -> pd.DataFrame:
    """
    Average lexicon score per newsgroup, weighted by word counts.

    Parameters
    ----------
    word_counts : pd.DataFrame
        Columns ["newsgroup", "word", "n"].
    lexicon : pd.DataFrame
        Columns ["word", "value"].

    Returns
    -------
    pd.DataFrame
        Columns ["newsgroup", "value"], sorted by value ascending.
    """
    joined = _join_lexicon(word_counts, lexicon)
    joined["weighted"] = joined["value"] * joined["n"]
    grouped = joined.groupby("newsgroup")[["weighted", "n"]].sum()
    result = (grouped["weighted"] / grouped["n"]).rename("value").reset_index()
    return result.sort_values("value").reset_index(drop=True)


def word_contributions(words: pd.DataFrame, lexicon: pd.DataFrame) -> pd.DataFrame:
    """
    Total contribution of each lexicon word across all messages.

    Parameters
    ----------
    words : pd.DataFrame
        Tidy word table with one row per token and a "word" column.
    lexicon : pd.DataFrame
        Columns ["word", "value"].

    Returns
    -------
    pd.DataFrame
        Columns ["word", "occurrences", "contribution"], sorted by absolute
        contribution descending.
    """
    joined = _join_lexicon(words, lexicon)
    result = joined.groupby("word").agg(
        occurrences=("value", "size"),
        contribution=("value", "sum"),
    )
    result = result.reset_index()
    order = result["contribution"].abs().sort_values(ascending=False, kind="mergesort").index
    return result.loc[order].reset_index(drop=True)


def top_sentiment_words(word_counts: pd.DataFrame, lexicon: pd.DataFrame) -> pd.DataFrame:
    """
    Per-newsgroup contribution of each lexicon word.

    contribution = value * n / (total words in the newsgroup)

    The denominator counts every word of the newsgroup in `word_counts`,
    not only the words found in the lexicon, so contributions are
    comparable between newsgroups of different sizes.

    Parameters
    ----------
    word_counts : pd.DataFrame
        Columns ["newsgroup", "word", "n"].
    lexicon : pd.DataFrame
        Columns ["word", "value"].

    Returns
    -------
    pd.DataFrame
        Columns ["newsgroup", "word", "n", "value", "contribution"], sorted
        by absolute contribution descending.
    """
    totals = word_counts.groupby("newsgroup")["n"].transform("sum")
    counts = word_counts.assign(total=totals)

    joined = _join_lexicon(counts, lexicon)
    joined["contribution"] = joined["value"] * joined["n"] / joined["total"]
    result = joined[["newsgroup", "word", "n", "value", "contribution"]]

    order = result["contribution"].abs().sort_values(ascending=False, kind="mergesort").index
    return result.loc[order].reset_index(drop=True)


def message_sentiment(
    words: pd.DataFrame,
    lexicon: pd.DataFrame,
    min_words: int = 0,
) -> pd.DataFrame:
    """
    Average lexicon score per message.

    Parameters
    ----------
    words : pd.DataFrame
        Tidy word table with columns ["newsgroup", "id", "word"].
    lexicon : pd.DataFrame
        Columns ["word", "value"].
    min_words : int
        Drop messages with fewer lexicon words than this.

    Returns
    -------
    pd.DataFrame
        Columns ["newsgroup", "id", "sentiment", "words"], sorted by
        sentiment descending.
    """
    joined = _join_lexicon(words, lexicon)
    result = joined.groupby(["newsgroup", "id"]).agg(
        sentiment=("value", "mean"),
        words=("value", "size"),
    )
    result = result.reset_index()
    result = result[result["words"] >= min_words]
    return result.sort_values(
        ["sentiment", "newsgroup", "id"], ascending=[False, True, True]
    ).reset_index(drop=True)


def get_message_text(
    cleaned_df: pd.DataFrame,
    newsgroup: str,
    message_id: str,
) -> List[str]:
    """
    Return the cleaned body lines of one message.

    Raises
    ------
    KeyError
        If the message has no lines in `cleaned_df`.
    """
    mask = (cleaned_df["newsgroup"] == newsgroup) & (
        cleaned_df["id"].astype(str) == str(message_id)
    )
    if not mask.any():
        raise KeyError(f"Message not found: {newsgroup}/{message_id}")
    return cleaned_df.loc[mask, "text"].tolist()


# ---------------------------------------------------------------------------
# Negation
# ---------------------------------------------------------------------------


def negated_words(
    bigrams: pd.DataFrame,
    lexicon: pd.DataFrame,
    negation_words: Iterable[str] = DEFAULT_NEGATION_WORDS,
) -> pd.DataFrame:
    """
    Find lexicon words that directly follow a negation word.

    Parameters
    ----------
    bigrams : pd.DataFrame
        Separated bigram table with columns ["word1", "word2"].
    lexicon : pd.DataFrame
        Columns ["word", "value"].
    negation_words : Iterable[str]
        Words that flip the meaning of the following word.

    Returns
    -------
    pd.DataFrame
        Columns ["word1", "word2", "value", "n", "contribution"] where
        contribution = value * n, sorted by absolute contribution descending.
    """
    negations = {w.lower() for w in negation_words}
    negated = bigrams[bigrams["word1"].isin(negations)]

    joined = _join_lexicon(negated, lexicon, word_col="word2")
    counts = (
        joined.groupby(["word1", "word2", "value"], sort=True)
        .size()
        .reset_index(name="n")
    )
    counts["contribution"] = counts["value"] * counts["n"]

    order = counts["contribution"].abs().sort_values(ascending=False, kind="mergesort").index
    return counts.loc[order].reset_index(drop=True)
