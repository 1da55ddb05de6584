"""Routing: ordered per-method route tables with most-specific matching.

Routes may be registered at any time; each method table is swapped
copy-on-write so matching never takes a lock.
"""
