"""
Data loading utilities.

This subpackage provides:
- functions to load the YAML data configuration
- raw line ingestion for a directory tree of Usenet messages,
  one subdirectory per newsgroup and one file per message.
"""
