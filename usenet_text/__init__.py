"""
Top-level package for the Usenet text-mining project.

This package contains modules for:
- reading a directory tree of Usenet messages into a row-per-line table
- stripping headers, signatures, and quoted replies from each message
- tokenizing cleaned text into tidy word and n-gram tables
- converting between tidy tables and sparse document-term matrices
- exploratory analyses (tf-idf, newsgroup correlation, topic models,
  lexicon-based sentiment, negation bigrams)
- shared helper functions (config, logging, filesystem)
"""
