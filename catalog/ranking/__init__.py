"""
Restaurant ranking core.

Responsibilities:
- Turn a restaurant's engagement facts into a single [0, 1] ranking score.
- Normalize listing / ranking query parameters into an immutable retrieval plan.
- Stay pure: no storage access, no logging, no shared mutable state.
"""
