"""
Shared utilities: run configuration loading, directory helpers,
and logger construction.
"""
