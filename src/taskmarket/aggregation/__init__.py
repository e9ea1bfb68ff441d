"""Aggregation module for review statistics.

- Reads reviews through a review store and produces per-user summaries
- Forbidden: review mutation
"""
