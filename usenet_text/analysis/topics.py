"""
LDA topic modelling over tidy count tables.

The tidy (document, term, n) table is cast to a document-term matrix and
fitted with scikit-learn's LatentDirichletAllocation. Results are tidied
back into two tables:

- beta  : (topic, term, beta)       per-topic term probabilities
- gamma : (document, topic, gamma)  per-document topic probabilities

Topics are numbered from 1.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

import joblib
import numpy as np
import pandas as pd
from sklearn.decomposition import LatentDirichletAllocation

from usenet_text.features.tidy_matrix import cast_sparse, tidy_matrix
from usenet_text.utils.run_utils import ensure_dir_exists


DEFAULT_MODEL_FILENAME = "lda_topic_model.joblib"

logger = logging.getLogger(__name__)


def _build_lda(
    n_topics: int = 4,
    random_state: int = 1234,
    max_iter: int = 20,
) -> LatentDirichletAllocation:
    return LatentDirichletAllocation(
        n_components=n_topics,
        learning_method="batch",
        max_iter=max_iter,
        random_state=random_state,
    )


def fit_topic_model(
    counts: pd.DataFrame,
    document_col: str = "document",
    term_col: str = "word",
    n_col: str = "n",
    n_topics: int = 4,
    random_state: int = 1234,
    max_iter: int = 20,
) -> Tuple[LatentDirichletAllocation, pd.DataFrame, pd.DataFrame]:
    """
    Fit an LDA topic model on a tidy count table.

    Parameters
    ----------
    counts : pd.DataFrame
        Tidy count table with one row per (document, term).
    document_col : str
        Document column; for Usenet messages a combined
        "newsgroup_id" label works well.
    term_col : str
        Term column.
    n_col : str
        Count column.
    n_topics : int
        Number of topics.
    random_state : int
        Seed for reproducible fits.
    max_iter : int
        Maximum number of EM iterations.

    Returns
    -------
    Tuple[LatentDirichletAllocation, pd.DataFrame, pd.DataFrame]
        (fitted model, beta table, gamma table)

    Raises
    ------
    ValueError
        If the count table is empty.
    """
    if counts.empty:
        raise ValueError("Cannot fit a topic model on an empty count table.")

    matrix, documents, terms = cast_sparse(counts, document_col, term_col, n_col)
    logger.info(
        "Fitting LDA with %d topics on %d documents x %d terms",
        n_topics,
        len(documents),
        len(terms),
    )

    model = _build_lda(n_topics=n_topics, random_state=random_state, max_iter=max_iter)
    doc_topic = model.fit_transform(matrix)

    topic_term = model.components_ / model.components_.sum(axis=1, keepdims=True)
    topic_labels = list(range(1, n_topics + 1))

    beta = tidy_matrix(
        topic_term,
        documents=topic_labels,
        terms=terms,
        row_col="topic",
        col_col="term",
        value_col="beta",
    )

    # Rows of fit_transform output already sum to 1.
    gamma = tidy_matrix(
        np.asarray(doc_topic),
        documents=documents,
        terms=topic_labels,
        row_col="document",
        col_col="topic",
        value_col="gamma",
    )

    return model, beta, gamma


def top_terms_per_topic(beta: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    """
    Keep the `n` highest-beta terms of every topic, ordered by topic then
    descending beta.
    """
    ranked = beta.sort_values(["topic", "beta"], ascending=[True, False])
    return ranked.groupby("topic", sort=False).head(n).reset_index(drop=True)


def save_topic_model(
    model: LatentDirichletAllocation,
    models_dir: str,
    filename: str = DEFAULT_MODEL_FILENAME,
) -> str:
    """
    Persist a fitted topic model with joblib and return its path.
    """
    ensure_dir_exists(models_dir)
    path = os.path.join(models_dir, filename)
    joblib.dump(model, path)
    return path


def load_topic_model(
    models_dir: str,
    filename: str = DEFAULT_MODEL_FILENAME,
) -> LatentDirichletAllocation:
    """
    Load a previously saved topic model from disk.

    Raises
    ------
    FileNotFoundError
        If the model file does not exist.
    """
    path = os.path.join(models_dir, filename)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Topic model not found at: {path}")

    model: LatentDirichletAllocation = joblib.load(path)
    return model


def message_documents(
    words: pd.DataFrame,
    newsgroup_prefix: Optional[str] = None,
    newsgroup_col: str = "newsgroup",
    id_col: str = "id",
    word_col: str = "word",
) -> pd.DataFrame:
    """
    Build a per-message tidy count table for topic modelling.

    Messages are labelled "<newsgroup>_<id>" in a "document" column.
    If `newsgroup_prefix` is given, only newsgroups starting with it
    (e.g. "sci.") are kept.
    """
    if newsgroup_prefix:
        words = words[words[newsgroup_col].astype(str).str.startswith(newsgroup_prefix)]

    labelled = words.assign(
        document=words[newsgroup_col].astype(str) + "_" + words[id_col].astype(str)
    )
    counts = labelled.groupby(["document", word_col], sort=True).size().reset_index(name="n")
    return counts
