"""
End-to-end Usenet analysis pipeline.

This module runs every step on one corpus:

- reading all message lines (config/data.yaml "dataset" section)
- stripping headers, signatures, and quoted replies
- tokenizing into words and bigrams
- word counts and tf-idf per newsgroup
- pairwise newsgroup correlation
- an LDA topic model over a subset of newsgroups
- sentiment by newsgroup, word, and message, plus negation bigrams
- writing each result table as CSV under the configured results_dir

It is callable both as a library function and via
scripts/run_usenet_analysis.py.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Any, Optional

import pandas as pd

from usenet_text.data.datasets import load_usenet_lines, DEFAULT_DATA_CONFIG_PATH
from usenet_text.features.preprocessing import clean_usenet_text, get_stopwords
from usenet_text.features.tokenize import unnest_words, unnest_ngrams, separate_ngrams
from usenet_text.features.tfidf import bind_tf_idf
from usenet_text.analysis.correlation import words_by_newsgroup, pairwise_correlation
from usenet_text.analysis.topics import (
    fit_topic_model,
    message_documents,
    save_topic_model,
    top_terms_per_topic,
)
from usenet_text.analysis.sentiment import (
    DEFAULT_NEGATION_WORDS,
    load_sentiment_lexicon,
    message_sentiment,
    negated_words,
    newsgroup_sentiment,
    top_sentiment_words,
    word_contributions,
)
from usenet_text.utils.run_utils import (
    DEFAULT_ANALYSIS_CONFIG_PATH,
    ensure_dir_exists,
    load_analysis_config,
)


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def _run_topics(
    words: pd.DataFrame,
    analysis_cfg: Dict[str, Any],
    save: bool,
) -> Dict[str, pd.DataFrame]:
    topics_cfg = analysis_cfg.get("topics", {}) or {}
    if not bool(topics_cfg.get("enabled", True)):
        logger.info("Topic modelling disabled in config; skipping.")
        return {}

    counts = message_documents(words, newsgroup_prefix=topics_cfg.get("newsgroup_prefix", "sci."))
    if counts.empty:
        logger.warning("No messages matched the topic-model newsgroup prefix; skipping.")
        return {}

    model, beta, gamma = fit_topic_model(
        counts,
        document_col="document",
        term_col="word",
        n_col="n",
        n_topics=int(topics_cfg.get("n_topics", 4)),
        random_state=int(topics_cfg.get("random_state", 1234)),
        max_iter=int(topics_cfg.get("max_iter", 20)),
    )

    if save:
        models_dir = (analysis_cfg.get("paths", {}) or {}).get("models_dir", "outputs/models")
        path = save_topic_model(model, models_dir)
        logger.info("Saved topic model to %s", path)

    return {
        "topic_terms": top_terms_per_topic(beta, n=int(topics_cfg.get("top_n", 10))),
        "topic_gamma": gamma,
    }


def _run_sentiment(
    words: pd.DataFrame,
    word_counts: pd.DataFrame,
    bigrams: pd.DataFrame,
    analysis_cfg: Dict[str, Any],
    lexicon: Optional[pd.DataFrame] = None,
) -> Dict[str, pd.DataFrame]:
    sentiment_cfg = analysis_cfg.get("sentiment", {}) or {}

    if lexicon is None:
        lexicon = load_sentiment_lexicon(
            name=sentiment_cfg.get("lexicon", "vader"),
            path=sentiment_cfg.get("lexicon_path"),
        )

    negations = sentiment_cfg.get("negation_words") or list(DEFAULT_NEGATION_WORDS)
    min_words = int(sentiment_cfg.get("min_message_words", 5))

    return {
        "newsgroup_sentiment": newsgroup_sentiment(word_counts, lexicon),
        "word_contributions": word_contributions(words, lexicon),
        "top_sentiment_words": top_sentiment_words(word_counts, lexicon),
        "message_sentiment": message_sentiment(words, lexicon, min_words=min_words),
        "negated_words": negated_words(bigrams, lexicon, negation_words=negations),
    }


def save_results(results: Dict[str, pd.DataFrame], results_dir: str) -> None:
    """
    Write every result table to `<results_dir>/<name>.csv`.
    """
    ensure_dir_exists(results_dir)
    for name, df in results.items():
        out_path = os.path.join(results_dir, f"{name}.csv")
        df.to_csv(out_path, index=False)
        logger.info("Saved %s (%d rows) to %s", name, len(df), out_path)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def run_usenet_analysis(
    data_config_path: str = DEFAULT_DATA_CONFIG_PATH,
    analysis_config_path: str = DEFAULT_ANALYSIS_CONFIG_PATH,
    root_dir: Optional[str] = None,
    save: bool = True,
    lexicon: Optional[pd.DataFrame] = None,
) -> Dict[str, pd.DataFrame]:
    """
    Run the full Usenet analysis pipeline.

    Parameters
    ----------
    data_config_path : str
        Path to config/data.yaml.
    analysis_config_path : str
        Path to config/analysis.yaml.
    root_dir : Optional[str]
        Corpus root; overrides "dataset.root_dir" when given.
    save : bool
        Whether to write result CSVs and the topic model to disk.
    lexicon : Optional[pd.DataFrame]
        Pre-loaded sentiment lexicon; if None, the configured one is loaded.

    Returns
    -------
    Dict[str, pd.DataFrame]
        Result tables keyed by name: "cleaned_text", "word_counts",
        "tf_idf", "newsgroup_correlations", "topic_terms", "topic_gamma",
        "newsgroup_sentiment", "word_contributions", "top_sentiment_words",
        "message_sentiment", "negated_words".
    """
    analysis_cfg = load_analysis_config(analysis_config_path)

    raw_df = load_usenet_lines(root_dir=root_dir, config_path=data_config_path)
    cleaned = clean_usenet_text(raw_df, config_path=data_config_path)

    stopwords = get_stopwords(data_config_path)
    words = unnest_words(cleaned, stopwords=stopwords, config_path=data_config_path)
    logger.info("Tokenized %d words from %d cleaned lines", len(words), len(cleaned))

    word_counts = words_by_newsgroup(words)
    tf_idf = bind_tf_idf(word_counts, term_col="word", document_col="newsgroup", n_col="n")
    tf_idf = tf_idf.sort_values("tf_idf", ascending=False).reset_index(drop=True)

    corr_cfg = analysis_cfg.get("correlation", {}) or {}
    correlations = pairwise_correlation(
        word_counts,
        item_col="newsgroup",
        feature_col="word",
        value_col="n",
        min_count=int(corr_cfg.get("min_count", 0)),
    )

    bigrams = separate_ngrams(
        unnest_ngrams(cleaned, n=2, output_col="bigram", config_path=data_config_path),
        col="bigram",
    )

    results: Dict[str, pd.DataFrame] = {
        "cleaned_text": cleaned,
        "word_counts": word_counts,
        "tf_idf": tf_idf,
        "newsgroup_correlations": correlations,
    }
    results.update(_run_topics(words, analysis_cfg, save=save))
    results.update(_run_sentiment(words, word_counts, bigrams, analysis_cfg, lexicon=lexicon))

    if save:
        results_dir = (analysis_cfg.get("paths", {}) or {}).get("results_dir", "outputs/results")
        save_results(results, results_dir)

    return results
