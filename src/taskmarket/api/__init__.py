"""API module for taskmarket.

API layer:
- Validates inputs, reads/writes DB
- Returns payloads for the frontend
- Forbidden: aggregation logic in route handlers
"""
