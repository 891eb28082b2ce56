"""
Text cleaning and feature extraction utilities.

This subpackage includes:
- the header/signature/quote stripper for Usenet messages
- word and n-gram tokenization into tidy tables
- conversions between tidy tables and sparse document-term matrices
- tf-idf weighting of tidy count tables.
"""
