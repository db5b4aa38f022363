"""Service layer — normalization, formatting and restriction evaluation.

Services may import from domain and config.
They must never import from commands or output.
"""
