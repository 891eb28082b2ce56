"""
Conversions between tidy tables and sparse document-term matrices.

Tidy tables hold one row per (document, term) pair, which suits grouping,
joining, and counting with pandas. Modelling libraries such as
scikit-learn instead expect a document-term matrix (DTM): one row per
document, one column per term. This module moves data in both
directions:

- `tidy_matrix` / `tidy_vectorizer_output`: sparse matrix -> tidy table
- `cast_sparse` / `cast_dtm`: tidy table -> scipy CSR matrix + labels
- `cast_frame`: tidy table -> dense wide DataFrame
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import sparse


def tidy_matrix(
    matrix: Any,
    documents: Optional[Sequence[Any]] = None,
    terms: Optional[Sequence[Any]] = None,
    row_col: str = "document",
    col_col: str = "term",
    value_col: str = "count",
) -> pd.DataFrame:
    """
    Turn a (sparse or dense) matrix into a tidy table of its non-zero cells.

    Parameters
    ----------
    matrix : array-like or scipy.sparse matrix
        Matrix of shape (n_documents, n_terms).
    documents : Optional[Sequence]
        Row labels; defaults to 0..n_documents-1.
    terms : Optional[Sequence]
        Column labels; defaults to 0..n_terms-1.
    row_col, col_col, value_col : str
        Names of the output columns.

    Returns
    -------
    pd.DataFrame
        One row per non-zero entry, ordered by row then column.
    """
    coo = sparse.coo_matrix(matrix)
    n_rows, n_cols = coo.shape

    documents = list(range(n_rows)) if documents is None else list(documents)
    terms = list(range(n_cols)) if terms is None else list(terms)
    if len(documents) != n_rows or len(terms) != n_cols:
        raise ValueError(
            f"Label lengths ({len(documents)}, {len(terms)}) do not match "
            f"matrix shape {coo.shape}."
        )

    # Duplicate coordinates are summed; explicit zeros are dropped.
    coo.sum_duplicates()
    nonzero = coo.data != 0
    rows, cols, data = coo.row[nonzero], coo.col[nonzero], coo.data[nonzero]

    order = np.lexsort((cols, rows))
    rows, cols, data = rows[order], cols[order], data[order]

    doc_labels = np.asarray(documents, dtype=object)
    term_labels = np.asarray(terms, dtype=object)
    return pd.DataFrame(
        {
            row_col: doc_labels[rows],
            col_col: term_labels[cols],
            value_col: data,
        }
    )


def tidy_vectorizer_output(
    vectorizer: Any,
    matrix: Any,
    documents: Optional[Sequence[Any]] = None,
    value_col: str = "count",
) -> pd.DataFrame:
    """
    Tidy the output of a fitted scikit-learn CountVectorizer/TfidfVectorizer.

    Parameters
    ----------
    vectorizer : CountVectorizer or TfidfVectorizer
        Fitted vectorizer; its feature names label the columns.
    matrix : scipy.sparse matrix
        Output of `vectorizer.transform(...)`.
    documents : Optional[Sequence]
        Document labels for the rows.
    value_col : str
        Name of the value column.

    Returns
    -------
    pd.DataFrame
        Tidy table with columns ["document", "term", value_col].
    """
    terms = list(vectorizer.get_feature_names_out())
    return tidy_matrix(matrix, documents=documents, terms=terms, value_col=value_col)


def _check_columns(df: pd.DataFrame, columns: Sequence[Optional[str]]) -> None:
    missing = [c for c in columns if c is not None and c not in df.columns]
    if missing:
        raise KeyError(
            f"Missing required column(s): {missing}. "
            f"Available columns: {list(df.columns)}"
        )


def cast_sparse(
    df: pd.DataFrame,
    row_col: str,
    column_col: str,
    value_col: Optional[str] = None,
) -> Tuple[sparse.csr_matrix, List[Any], List[Any]]:
    """
    Cast a tidy table into a sparse matrix.

    Row and column labels are the sorted unique values of `row_col` and
    `column_col`. Duplicate (row, column) pairs are summed. If `value_col`
    is None, every row counts as 1.

    Returns
    -------
    Tuple[sparse.csr_matrix, List, List]
        (matrix, row_labels, column_labels)
    """
    _check_columns(df, [row_col, column_col, value_col])

    row_codes, row_labels = pd.factorize(df[row_col], sort=True)
    col_codes, col_labels = pd.factorize(df[column_col], sort=True)

    if value_col is None:
        values = np.ones(len(df), dtype=np.int64)
    else:
        values = df[value_col].to_numpy()

    matrix = sparse.coo_matrix(
        (values, (row_codes, col_codes)),
        shape=(len(row_labels), len(col_labels)),
    ).tocsr()
    matrix.sum_duplicates()

    return matrix, list(row_labels), list(col_labels)


def cast_dtm(
    df: pd.DataFrame,
    document_col: str = "document",
    term_col: str = "term",
    value_col: Optional[str] = "count",
) -> Tuple[sparse.csr_matrix, List[Any], List[Any]]:
    """
    Cast a tidy (document, term, value) table into a document-term matrix.

    Returns (matrix, documents, terms); see `cast_sparse`.
    """
    return cast_sparse(df, document_col, term_col, value_col)


def cast_frame(
    df: pd.DataFrame,
    row_col: str,
    column_col: str,
    value_col: str,
    fill_value: float = 0,
) -> pd.DataFrame:
    """
    Cast a tidy table into a dense wide DataFrame, filling missing cells.
    """
    _check_columns(df, [row_col, column_col, value_col])
    return df.pivot_table(
        index=row_col,
        columns=column_col,
        values=value_col,
        aggfunc="sum",
        fill_value=fill_value,
    )
