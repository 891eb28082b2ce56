"""
Dataset loading utilities for a Usenet message corpus.

This module is responsible for:
- reading the dataset configuration from config/data.yaml
- reading every line of every message file in a newsgroup folder
- combining all newsgroup folders into one row-per-line DataFrame with
  the standard columns ("newsgroup", "id", "text")

The expected layout on disk is the 20 Newsgroups "bydate" layout:

    <root_dir>/
        alt.atheism/
            49960
            51060
            ...
        comp.graphics/
            ...

Each file holds RFC822-like headers, a blank line, and the message body.
The resulting DataFrame is the input of the cleaning step in
`usenet_text.features.preprocessing`.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Any, List, Optional

import pandas as pd
import yaml


DEFAULT_DATA_CONFIG_PATH = "config/data.yaml"

REQUIRED_SECTIONS = ("dataset", "cleaning", "tokenize", "stopwords")

logger = logging.getLogger(__name__)


def _load_yaml(path: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file and return it as a dictionary.

    Parameters
    ----------
    path : str
        Path to the YAML file.

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content.

    Raises
    ------
    FileNotFoundError
        If the YAML file does not exist.
    ValueError
        If the YAML file is empty or cannot be parsed.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    if cfg is None:
        raise ValueError(f"Config file is empty or invalid: {path}")

    return cfg


def load_data_config(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load and return the full data configuration dictionary.

    Parameters
    ----------
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Dictionary containing the "dataset", "cleaning", "tokenize" and
        "stopwords" sections.
    """
    cfg = _load_yaml(config_path)

    for section in REQUIRED_SECTIONS:
        if section not in cfg:
            raise KeyError(f'Missing "{section}" section in data config: {config_path}')

    return cfg


def _read_lines(path: str, encoding: str) -> List[str]:
    # errors="replace" keeps stray bytes from aborting a whole corpus read.
    # Only \n, \r and \r\n end a line; form feeds and NEL (latin-1 0x85)
    # stay inside it.
    with open(path, "r", encoding=encoding, errors="replace") as f:
        return [line.rstrip("\r\n") for line in f]


def read_folder(folder: str, encoding: str = "latin-1") -> pd.DataFrame:
    """
    Read every line of every message file in a single newsgroup folder.

    Files are visited in sorted name order; the file name is used as the
    message id.

    Parameters
    ----------
    folder : str
        Directory containing one file per message.
    encoding : str
        Text encoding of the message files.

    Returns
    -------
    pd.DataFrame
        DataFrame with columns ["id", "text"], one row per line.
    """
    ids: List[str] = []
    texts: List[str] = []

    for name in sorted(os.listdir(folder)):
        path = os.path.join(folder, name)
        if not os.path.isfile(path):
            continue
        lines = _read_lines(path, encoding)
        ids.extend([name] * len(lines))
        texts.extend(lines)

    return pd.DataFrame({"id": ids, "text": texts}, dtype=str)


def load_usenet_lines(
    root_dir: Optional[str] = None,
    config_path: str = DEFAULT_DATA_CONFIG_PATH,
) -> pd.DataFrame:
    """
    Load all lines of all messages under the configured corpus root.

    Each subdirectory of `root_dir` is treated as one newsgroup.

    Parameters
    ----------
    root_dir : Optional[str]
        Corpus root directory. If None, "dataset.root_dir" from
        config/data.yaml is used.
    config_path : str
        Path to the data YAML configuration.

    Returns
    -------
    pd.DataFrame
        DataFrame with columns ["newsgroup", "id", "text"].

    Raises
    ------
    FileNotFoundError
        If the corpus root does not exist.
    ValueError
        If the corpus root contains no newsgroup folders.
    """
    cfg = load_data_config(config_path)
    dataset_cfg = cfg["dataset"]

    if root_dir is None:
        root_dir = dataset_cfg.get("root_dir", "data/raw/20news-bydate-train")
    encoding = dataset_cfg.get("encoding", "latin-1")

    if not os.path.isdir(root_dir):
        raise FileNotFoundError(f"Usenet corpus directory not found at: {root_dir}")

    newsgroups = sorted(
        d for d in os.listdir(root_dir) if os.path.isdir(os.path.join(root_dir, d))
    )
    if not newsgroups:
        raise ValueError(f"No newsgroup folders found under: {root_dir}")

    frames = []
    for newsgroup in newsgroups:
        folder_df = read_folder(os.path.join(root_dir, newsgroup), encoding=encoding)
        folder_df.insert(0, "newsgroup", newsgroup)
        frames.append(folder_df)
        logger.debug(
            "Read %d lines from %s (%d messages)",
            len(folder_df),
            newsgroup,
            folder_df["id"].nunique(),
        )

    raw_df = pd.concat(frames, axis=0, ignore_index=True)
    logger.info(
        "Loaded %d lines from %d newsgroups under %s",
        len(raw_df),
        len(newsgroups),
        root_dir,
    )
    return raw_df
