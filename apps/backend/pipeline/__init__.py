"""
Job URL extraction pipeline.

Turns a single job-posting URL into a normalized job record: fetch once,
run site-specific or generic extraction, merge URL hints, clean, score and
record per-domain learning statistics.
"""

__version__ = "1.0.0"
