"""
Word frequency and newsgroup similarity helpers.

- `words_by_newsgroup`: count words per newsgroup from a tidy word table
- `pairwise_correlation`: Pearson correlation between items (e.g.
  newsgroups) across features (e.g. words), where absent pairs count
  as zero
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from usenet_text.features.tidy_matrix import cast_sparse
from usenet_text.features.tokenize import count_words


logger = logging.getLogger(__name__)


def words_by_newsgroup(
    words: pd.DataFrame,
    newsgroup_col: str = "newsgroup",
    word_col: str = "word",
) -> pd.DataFrame:
    """
    Count word occurrences within each newsgroup.

    Returns a DataFrame with columns [newsgroup_col, word_col, "n"],
    sorted by "n" descending.
    """
    return count_words(words, by=[newsgroup_col], word_col=word_col)


def pairwise_correlation(
    df: pd.DataFrame,
    item_col: str = "newsgroup",
    feature_col: str = "word",
    value_col: str = "n",
    min_count: int = 0,
) -> pd.DataFrame:
    """
    Correlate every pair of items across their feature values.

    Parameters
    ----------
    df : pd.DataFrame
        Tidy table with one row per (item, feature).
    item_col : str
        Column whose values are correlated with each other.
    feature_col : str
        Column whose values form the observations.
    value_col : str
        Column holding the observed values.
    min_count : int
        Drop features whose total value across all items is below this.

    Returns
    -------
    pd.DataFrame
        Columns ["item1", "item2", "correlation"], both orderings of each
        pair, no self-pairs, sorted by correlation descending.
    """
    if min_count > 0:
        totals = df.groupby(feature_col)[value_col].transform("sum")
        df = df[totals >= min_count]

    matrix, items, _ = cast_sparse(df, item_col, feature_col, value_col)
    if len(items) < 2:
        logger.warning("Need at least two %s values to correlate; got %d.", item_col, len(items))
        return pd.DataFrame(columns=["item1", "item2", "correlation"])

    # Rows are items, columns are features.
    with np.errstate(invalid="ignore", divide="ignore"):
        corr = np.corrcoef(matrix.toarray().astype(float))

    item_index = np.arange(len(items))
    first, second = np.meshgrid(item_index, item_index, indexing="ij")
    off_diagonal = first != second

    labels = np.asarray(items, dtype=object)
    result = pd.DataFrame(
        {
            "item1": labels[first[off_diagonal]],
            "item2": labels[second[off_diagonal]],
            "correlation": corr[off_diagonal],
        }
    )
    return result.sort_values(
        ["correlation", "item1", "item2"],
        ascending=[False, True, True],
        na_position="last",
    ).reset_index(drop=True)
