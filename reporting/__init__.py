"""
Command-line reporting for property snapshots.

Ranks a snapshot under a dashboard query and normalizes scraped listings.
Run with ``python -m reporting.cli``.
"""
