"""Published metrics state and exposition.

This module holds the latest aggregation snapshot behind a lock
and renders it for Prometheus scrapes.
"""
