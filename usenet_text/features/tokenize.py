"""
Tokenization of cleaned Usenet text into tidy tables.

Every function here takes a DataFrame with one row per line of text and
returns a DataFrame with one row per token, carrying the remaining columns
(typically "newsgroup" and "id") along with each token.

Tokenization is done per line, so n-grams never span two lines.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Set, Dict, Any

import pandas as pd
from nltk.tokenize import RegexpTokenizer
from nltk.util import ngrams as nltk_ngrams

from usenet_text.data.datasets import load_data_config, DEFAULT_DATA_CONFIG_PATH
from usenet_text.features.preprocessing import get_stopwords


# Words keep inner apostrophes ("don't") and decimal parts ("3.5").
DEFAULT_TOKEN_PATTERN = r"[a-z0-9]+(?:['.][a-z0-9]+)*'?"
# Keep only tokens ending in a letter or apostrophe; drops bare numbers.
DEFAULT_KEEP_PATTERN = r"[a-z']$"


def _get_tokenize_cfg(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> Dict[str, Any]:
    cfg = load_data_config(config_path)
    return cfg["tokenize"] or {}


def _build_tokenizer(pattern: str = DEFAULT_TOKEN_PATTERN) -> RegexpTokenizer:
    return RegexpTokenizer(pattern)


def tokenize_line(text: str, tokenizer: Optional[RegexpTokenizer] = None) -> List[str]:
    """
    Lowercase a line of text and split it into word tokens.

    Parameters
    ----------
    text : str
        Raw line of text.
    tokenizer : Optional[RegexpTokenizer]
        Tokenizer to use; defaults to one built from DEFAULT_TOKEN_PATTERN.

    Returns
    -------
    List[str]
        Word tokens, in order.
    """
    if not isinstance(text, str):
        return []
    if tokenizer is None:
        tokenizer = _build_tokenizer()
    return tokenizer.tokenize(text.lower())


def _check_column(df: pd.DataFrame, column: str) -> None:
    if column not in df.columns:
        raise KeyError(
            f"Column '{column}' not found in DataFrame. "
            f"Available columns: {list(df.columns)}"
        )


def _explode_tokens(
    df: pd.DataFrame,
    input_col: str,
    output_col: str,
    tokens: pd.Series,
) -> pd.DataFrame:
    out = df.drop(columns=[input_col]).copy()
    out[output_col] = tokens
    out = out.explode(output_col)
    out = out.dropna(subset=[output_col])
    out[output_col] = out[output_col].astype(str)
    return out.reset_index(drop=True)


def unnest_words(
    df: pd.DataFrame,
    input_col: str = "text",
    output_col: str = "word",
    stopwords: Optional[Set[str]] = None,
    drop_stopwords: bool = True,
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> pd.DataFrame:
    """
    Split each line into lowercase word tokens, one row per token.

    Tokens not ending in a letter or apostrophe are dropped (this removes
    bare numbers), as are stopwords when `drop_stopwords` is True.

    Parameters
    ----------
    df : pd.DataFrame
        Row-per-line DataFrame containing `input_col`.
    input_col : str
        Name of the text column.
    output_col : str
        Name of the token column in the output.
    stopwords : Optional[Set[str]]
        Stopword set; if None, it is built from config/data.yaml.
    drop_stopwords : bool
        Whether to remove stopwords at all.
    config_path : str
        Path to the data YAML configuration.

    Returns
    -------
    pd.DataFrame
        DataFrame with every column of `df` except `input_col`, plus
        `output_col`.
    """
    _check_column(df, input_col)

    tok_cfg = _get_tokenize_cfg(config_path)
    tokenizer = _build_tokenizer(tok_cfg.get("token_pattern", DEFAULT_TOKEN_PATTERN))
    keep_pattern = tok_cfg.get("keep_pattern", DEFAULT_KEEP_PATTERN)

    tokens = df[input_col].apply(lambda t: tokenize_line(t, tokenizer))
    words = _explode_tokens(df, input_col, output_col, tokens)

    keep = words[output_col].str.contains(keep_pattern, regex=True)
    if drop_stopwords:
        if stopwords is None:
            stopwords = get_stopwords(config_path)
        keep &= ~words[output_col].isin(stopwords)

    return words[keep].reset_index(drop=True)


def _line_ngrams(tokens: Sequence[str], n: int) -> List[str]:
    return [" ".join(gram) for gram in nltk_ngrams(tokens, n)]


def unnest_ngrams(
    df: pd.DataFrame,
    n: int = 2,
    input_col: str = "text",
    output_col: str = "bigram",
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> pd.DataFrame:
    """
    Split each line into n-grams of consecutive words, one row per n-gram.

    Stopwords are kept, since words like "not" matter for negation
    analysis. Lines shorter than `n` words produce no rows.

    Parameters
    ----------
    df : pd.DataFrame
        Row-per-line DataFrame containing `input_col`.
    n : int
        Number of words per n-gram.
    input_col : str
        Name of the text column.
    output_col : str
        Name of the n-gram column; each value is the words joined by a
        single space.
    config_path : str
        Path to the data YAML configuration.

    Returns
    -------
    pd.DataFrame
        DataFrame with every column of `df` except `input_col`, plus
        `output_col`.
    """
    if n < 1:
        raise ValueError(f"n must be a positive integer, got {n}")
    _check_column(df, input_col)

    tok_cfg = _get_tokenize_cfg(config_path)
    tokenizer = _build_tokenizer(tok_cfg.get("token_pattern", DEFAULT_TOKEN_PATTERN))

    grams = df[input_col].apply(lambda t: _line_ngrams(tokenize_line(t, tokenizer), n))
    return _explode_tokens(df, input_col, output_col, grams)


def separate_ngrams(
    df: pd.DataFrame,
    col: str = "bigram",
    into: Iterable[str] = ("word1", "word2"),
) -> pd.DataFrame:
    """
    Split a space-joined n-gram column into one column per word.

    The n-gram column is replaced by the `into` columns.
    """
    _check_column(df, col)
    into = list(into)

    if df.empty:
        out = df.drop(columns=[col]).copy()
        for name in into:
            out[name] = pd.Series(dtype=str)
        return out.reset_index(drop=True)

    parts = df[col].str.split(" ", n=len(into) - 1, expand=True)
    if parts.shape[1] != len(into):
        raise ValueError(
            f"Cannot split column '{col}' into {len(into)} columns; "
            f"found {parts.shape[1]} parts."
        )
    parts.columns = into

    out = df.drop(columns=[col]).reset_index(drop=True)
    return pd.concat([out, parts.reset_index(drop=True)], axis=1)


def count_words(
    df: pd.DataFrame,
    by: Optional[Iterable[str]] = None,
    word_col: str = "word",
) -> pd.DataFrame:
    """
    Count token occurrences, optionally within groups.

    Returns a DataFrame with columns `by + [word_col, "n"]`, sorted by
    "n" descending (ties broken by the grouping columns and token).
    """
    keys = list(by or []) + [word_col]
    for key in keys:
        _check_column(df, key)

    counts = df.groupby(keys, sort=False).size().reset_index(name="n")
    return counts.sort_values(
        ["n"] + keys, ascending=[False] + [True] * len(keys)
    ).reset_index(drop=True)
