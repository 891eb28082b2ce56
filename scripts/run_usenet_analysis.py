"""
Run the full Usenet text analysis.

This script is a convenience wrapper around
`usenet_text.analysis.report.run_usenet_analysis`, which:

- reads every message under the configured corpus root
- strips headers, signatures, and quoted replies
- tokenizes the cleaned text into words and bigrams
- computes word counts, tf-idf, newsgroup correlations, an LDA topic
  model, and lexicon-based sentiment tables
- writes each table as CSV under outputs/results/

Usage (from project root):

    python -m scripts.run_usenet_analysis
    # or
    python scripts/run_usenet_analysis.py --root-dir data/raw/20news-bydate-train
"""

from __future__ import annotations

import argparse

from usenet_text.analysis.report import run_usenet_analysis
from usenet_text.utils.run_utils import load_analysis_config, get_logger


def parse_args() -> argparse.Namespace:
    """
    Parse command-line arguments.
    """
    parser = argparse.ArgumentParser(
        description="Clean, tokenize, and analyse a Usenet message corpus."
    )
    parser.add_argument(
        "--data-config",
        type=str,
        default="config/data.yaml",
        help="Path to data config YAML (default: config/data.yaml).",
    )
    parser.add_argument(
        "--analysis-config",
        type=str,
        default="config/analysis.yaml",
        help="Path to analysis config YAML (default: config/analysis.yaml).",
    )
    parser.add_argument(
        "--root-dir",
        type=str,
        default=None,
        help="Corpus root directory; overrides dataset.root_dir in the data config.",
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Do not write result CSVs or the topic model to disk.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    analysis_cfg = load_analysis_config(args.analysis_config)
    logger = get_logger(
        name="run_usenet_analysis",
        config=analysis_cfg,
        log_file_suffix="run",
    )

    logger.info("=" * 80)
    logger.info("Starting Usenet analysis.")
    logger.info(
        "Configs: data=%s, analysis=%s, root_dir=%s",
        args.data_config,
        args.analysis_config,
        args.root_dir or "(from config)",
    )

    results = run_usenet_analysis(
        data_config_path=args.data_config,
        analysis_config_path=args.analysis_config,
        root_dir=args.root_dir,
        save=not args.no_save,
    )

    for name, df in results.items():
        if df.empty:
            logger.warning("Result table %s is empty.", name)
            continue
        logger.info("%s (%d rows):\n%s", name, len(df), df.head(10).to_string(index=False))

    logger.info("Usenet analysis completed.")


if __name__ == "__main__":
    main()
