"""
Exploratory analyses over tidy Usenet tables.

This subpackage provides:
- word counts per newsgroup and pairwise newsgroup correlation
- LDA topic modelling
- lexicon-based sentiment and negation analysis
- an end-to-end runner that writes every result table as CSV.
"""
