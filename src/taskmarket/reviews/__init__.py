"""Review submission and moderation.

- Creates reviews and runs the verify/report workflows
- Forbidden: statistics computation
"""
