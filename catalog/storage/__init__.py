"""
In-memory catalog storage.

Responsibilities:
- Hold categories and restaurants with their engagement aggregates.
- Keep each restaurant's ranking score current whenever its facts change.
- Execute retrieval plans (filter, sort, paginate) with pandas.
"""
