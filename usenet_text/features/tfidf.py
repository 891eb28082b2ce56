"""
TF–IDF weighting of tidy count tables.

Given a tidy table with one row per (document, term) and a count column,
`bind_tf_idf` adds:

- tf     : the term's share of all term occurrences in the document
- idf    : ln(n_documents / n_documents_containing_term)
- tf_idf : tf * idf

The idf vector is computed by scikit-learn's TfidfTransformer on the
document-term matrix cast from the tidy table. With smooth_idf=False,
scikit-learn reports ln(n / df) + 1; we subtract the constant so that
terms present in every document get an idf of exactly zero.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from sklearn.feature_extraction.text import TfidfTransformer

from usenet_text.features.tidy_matrix import cast_sparse


def _build_idf_transformer() -> TfidfTransformer:
    """
    Construct an unfitted TfidfTransformer used only for its idf_ vector.
    """
    return TfidfTransformer(
        norm=None,
        use_idf=True,
        smooth_idf=False,
        sublinear_tf=False,
    )


def compute_idf(
    df: pd.DataFrame,
    term_col: str = "word",
    document_col: str = "document",
    n_col: str = "n",
) -> pd.Series:
    """
    Compute the inverse document frequency of every term in a tidy table.

    Parameters
    ----------
    df : pd.DataFrame
        Tidy count table.
    term_col : str
        Term column.
    document_col : str
        Document column.
    n_col : str
        Count column.

    Returns
    -------
    pd.Series
        idf values indexed by term.
    """
    matrix, _, terms = cast_sparse(df, document_col, term_col, n_col)
    transformer = _build_idf_transformer()
    transformer.fit(matrix)
    return pd.Series(transformer.idf_ - 1.0, index=terms, name="idf")


def bind_tf_idf(
    df: pd.DataFrame,
    term_col: str = "word",
    document_col: str = "document",
    n_col: str = "n",
) -> pd.DataFrame:
    """
    Add "tf", "idf" and "tf_idf" columns to a tidy count table.

    Row order and all existing columns are preserved.

    Parameters
    ----------
    df : pd.DataFrame
        Tidy count table with one row per (document, term).
    term_col : str
        Term column, e.g. "word".
    document_col : str
        Document column, e.g. "newsgroup".
    n_col : str
        Count column.

    Returns
    -------
    pd.DataFrame
        Copy of `df` with the three extra columns.
    """
    out = df.copy()
    if out.empty:
        for col in ("tf", "idf", "tf_idf"):
            out[col] = pd.Series(dtype=float)
        return out

    totals = out.groupby(document_col)[n_col].transform("sum")
    out["tf"] = out[n_col] / totals

    idf = compute_idf(out, term_col=term_col, document_col=document_col, n_col=n_col)
    out["idf"] = out[term_col].map(idf).astype(float)
    out["tf_idf"] = out["tf"] * out["idf"]

    # Float noise from the +1 offset can leave tiny negatives.
    out.loc[np.isclose(out["idf"], 0.0), ["idf", "tf_idf"]] = 0.0
    return out


def top_tf_idf(
    df: pd.DataFrame,
    document_col: str = "document",
    n: int = 10,
) -> pd.DataFrame:
    """
    Keep the `n` highest tf-idf rows within each document.
    """
    ranked = df.sort_values([document_col, "tf_idf"], ascending=[True, False])
    return ranked.groupby(document_col, sort=False).head(n).reset_index(drop=True)
