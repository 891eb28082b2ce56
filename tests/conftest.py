"""
Shared fixtures: a tiny on-disk Usenet corpus and a small sentiment lexicon.

The corpus mimics the 20 Newsgroups "bydate" layout (one folder per
newsgroup, one file per message) so that the loaders, the cleaner, and
the full pipeline can run without the real dataset.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest


ROOT = Path(__file__).resolve().parents[1]
DATA_CONFIG_PATH = str(ROOT / "config" / "data.yaml")
ANALYSIS_CONFIG_PATH = str(ROOT / "config" / "analysis.yaml")


MESSAGES = {
    "sci.space": {
        "1001": [
            "From: alice@example.com",
            "Subject: launch window",
            "",
            "The launch was a great success.",
            "",
            "> Did the rocket fail?",
            "bob@example.com writes:",
            "Orbit insertion was good and the rocket performed well.",
            "--",
            "Alice",
        ],
        "9704": [
            "From: broken@example.com",
            "",
            "rocket rocket rocket",
        ],
    },
    "sci.med": {
        "2001": [
            "From: carol@example.com",
            "Subject: doctor",
            "",
            "In article <abc@example.com>, dave@example.com wrote:",
            "The doctor was not happy with the bad results.",
            "Patients are not good at waiting.",
        ],
    },
    "rec.autos": {
        "3001": [
            "From: erin@example.com",
            "",
            "My car is great and the engine is great.",
            "I don't like the brakes, they are bad.",
        ],
    },
}


@pytest.fixture
def usenet_root(tmp_path: Path) -> str:
    """
    Write MESSAGES to disk and return the corpus root directory.
    """
    root = tmp_path / "corpus"
    for newsgroup, messages in MESSAGES.items():
        folder = root / newsgroup
        folder.mkdir(parents=True)
        for message_id, lines in messages.items():
            (folder / message_id).write_text("\n".join(lines) + "\n", encoding="latin-1")
    return str(root)


@pytest.fixture
def lexicon() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "word": ["great", "success", "good", "bad", "happy", "like", "fail"],
            "value": [3.0, 2.0, 3.0, -3.0, 3.0, 2.0, -2.0],
        }
    )
