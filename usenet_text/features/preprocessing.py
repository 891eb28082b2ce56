"""
Message cleaning utilities for Usenet posts.

Raw Usenet messages carry a lot of text that is not the author's own
writing. Before tokenization we strip, per message:

- the header block (everything up to and including the first blank line)
- the signature block (the first line starting with "--" and everything
  after it)
- quoted reply lines (lines starting with ">") and other lines with no
  alphanumeric content after a leading run of non-">" characters
- attribution lines ("... writes:", "... writes...", "In article <...")
- a small set of known-malformed messages, excluded by id

This is a best-effort heuristic, not a validated parser: malformed input
simply yields an empty or partial body, and some quoted text that is not
marked with ">" will slip through.

We provide a helper for a single message (a list of lines) as well as a
vectorized version operating on the row-per-line DataFrame produced by
`usenet_text.data.datasets.load_usenet_lines`. Both apply exactly the
same rules.
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Iterable, List, Optional, Set, Dict, Any

import pandas as pd

from usenet_text.data.datasets import load_data_config, DEFAULT_DATA_CONFIG_PATH

# NLTK stopwords are preferred; scikit-learn's English list is used when
# the NLTK corpus has not been downloaded.
from nltk.corpus import stopwords as nltk_stopwords
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS as SKLEARN_EN_STOPWORDS


logger = logging.getLogger(__name__)

# Messages that are malformed in the 20 Newsgroups training split.
DEFAULT_EXCLUDED_IDS = frozenset({"9704", "9985"})

SIGNATURE_PATTERN = r"^--"
BODY_LINE_PATTERN = r"^[^>]+[A-Za-z\d]"
ATTRIBUTION_PATTERNS = (r"writes(?::|\.\.\.)$", r"^In article <")

_SIGNATURE_RE = re.compile(SIGNATURE_PATTERN)
_BODY_LINE_RE = re.compile(BODY_LINE_PATTERN)
_ATTRIBUTION_RES = tuple(re.compile(p) for p in ATTRIBUTION_PATTERNS)


# ---------------------------------------------------------------------------
# Single-message stripper
# ---------------------------------------------------------------------------


class _ScanState(enum.Enum):
    HEADER = "header"
    BODY = "body"
    SIGNATURE = "signature"


def is_body_line(line: str) -> bool:
    """
    Return True if a line survives the quoted-reply and attribution filters.

    A line is kept when it is blank, or when it has an alphanumeric
    character after a leading run of non-">" characters, and it is not an
    attribution line ("... writes:", "... writes...", "In article <").
    """
    if line != "" and not _BODY_LINE_RE.search(line):
        return False
    return not any(p.search(line) for p in _ATTRIBUTION_RES)


def _scan_body(lines: Iterable[str], strip_headers: bool = True) -> List[str]:
    state = _ScanState.HEADER if strip_headers else _ScanState.BODY
    body: List[str] = []

    for line in lines:
        if _SIGNATURE_RE.search(line):
            state = _ScanState.SIGNATURE
        if state is _ScanState.SIGNATURE:
            # Nothing after a signature marker is body text.
            break
        if state is _ScanState.HEADER:
            if line == "":
                state = _ScanState.BODY
            continue
        body.append(line)

    return body


def strip_message_lines(
    lines: Iterable[str],
    message_id: Optional[str] = None,
    excluded_ids: Iterable[str] = DEFAULT_EXCLUDED_IDS,
    strip_headers: bool = True,
) -> List[str]:
    """
    Strip headers, signature, and quoted replies from one message.

    Parameters
    ----------
    lines : Iterable[str]
        Raw lines of the message, in order, without line terminators.
    message_id : Optional[str]
        Message id; messages whose id is in `excluded_ids` yield no lines.
    excluded_ids : Iterable[str]
        Ids of known-malformed messages.
    strip_headers : bool
        If True, drop every line up to and including the first blank line.
        Pass False when re-cleaning text that has already lost its header.

    Returns
    -------
    List[str]
        Body lines, order preserved.
    """
    if message_id is not None and str(message_id) in {str(i) for i in excluded_ids}:
        return []

    body = _scan_body(lines, strip_headers=strip_headers)
    return [line for line in body if is_body_line(line)]


# ---------------------------------------------------------------------------
# DataFrame stripper
# ---------------------------------------------------------------------------


def _get_cleaning_cfg(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> Dict[str, Any]:
    cfg = load_data_config(config_path)
    return cfg["cleaning"] or {}


def get_excluded_ids(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> Set[str]:
    """
    Return the configured set of excluded message ids as strings.
    """
    cleaning_cfg = _get_cleaning_cfg(config_path)
    ids = cleaning_cfg.get("excluded_ids", sorted(DEFAULT_EXCLUDED_IDS))
    return {str(i) for i in (ids or [])}


def clean_usenet_text(
    raw_df: pd.DataFrame,
    excluded_ids: Optional[Iterable[str]] = None,
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> pd.DataFrame:
    """
    Apply the message stripper to every message of a row-per-line table.

    Parameters
    ----------
    raw_df : pd.DataFrame
        DataFrame with columns ["newsgroup", "id", "text"], lines of each
        message in order.
    excluded_ids : Optional[Iterable[str]]
        Ids of known-malformed messages. If None, "cleaning.excluded_ids"
        from config/data.yaml is used.
    config_path : str
        Path to the data YAML configuration.

    Returns
    -------
    pd.DataFrame
        Filtered DataFrame with the same columns and a fresh index.

    Raises
    ------
    KeyError
        If any of the required columns is missing.
    """
    missing_cols = [c for c in ("newsgroup", "id", "text") if c not in raw_df.columns]
    if missing_cols:
        raise KeyError(
            f"Missing required column(s) for cleaning: {missing_cols}. "
            f"Available columns: {list(raw_df.columns)}"
        )

    if excluded_ids is None:
        excluded_ids = get_excluded_ids(config_path)
    excluded = {str(i) for i in excluded_ids}

    text = raw_df["text"].fillna("").astype(str)
    keys = [raw_df["newsgroup"], raw_df["id"]]

    # Header: keep a line only once a blank line has been seen before it.
    blank = text.eq("").astype(int)
    blanks_before = blank.groupby(keys, sort=False).cumsum() - blank
    past_header = blanks_before > 0

    # Signature: drop the first "--" line and everything after it.
    signature = text.str.contains(SIGNATURE_PATTERN, regex=True).astype(int)
    in_signature = signature.groupby(keys, sort=False).cumsum() > 0

    body_like = text.str.contains(BODY_LINE_PATTERN, regex=True) | text.eq("")
    attribution = pd.Series(False, index=raw_df.index)
    for pattern in ATTRIBUTION_PATTERNS:
        attribution |= text.str.contains(pattern, regex=True)

    not_excluded = ~raw_df["id"].astype(str).isin(excluded)

    mask = past_header & ~in_signature & body_like & ~attribution & not_excluded
    cleaned = raw_df[mask].reset_index(drop=True)

    logger.info(
        "Cleaning kept %d of %d lines (%d messages with remaining text)",
        len(cleaned),
        len(raw_df),
        cleaned.groupby(["newsgroup", "id"]).ngroups if not cleaned.empty else 0,
    )
    return cleaned


# ---------------------------------------------------------------------------
# Stopwords
# ---------------------------------------------------------------------------


def _get_stopword_set(language: str = "english") -> Set[str]:
    """
    Build a set of stopwords for the given language.

    We prefer NLTK stopwords, falling back to scikit-learn's English
    stopwords when the NLTK corpus is not available locally.

    Parameters
    ----------
    language : str
        Language name, e.g. "english".

    Returns
    -------
    Set[str]
        Set of stopwords.
    """
    lang = (language or "english").lower()

    try:
        # Users may need to call:
        #   nltk.download("stopwords")
        return set(nltk_stopwords.words(lang))
    except (LookupError, OSError):
        logger.debug("NLTK stopwords for %r unavailable; using fallback.", lang)

    if lang == "english":
        return set(SKLEARN_EN_STOPWORDS)

    # No stopword removal for unsupported languages without NLTK data.
    return set()


def get_stopwords(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> Set[str]:
    """
    Return the stopword set configured in the "stopwords" section of
    config/data.yaml, or an empty set if stopword removal is disabled.
    """
    cfg = load_data_config(config_path)
    sw_cfg = cfg["stopwords"] or {}

    if not bool(sw_cfg.get("enabled", True)):
        return set()

    stopword_set = _get_stopword_set(sw_cfg.get("language", "english"))
    stopword_set.update(str(w).lower() for w in (sw_cfg.get("extra") or []))
    return stopword_set

