"""Domain layer — temporal types, operands, specs and outcomes.

This layer depends only on stdlib and pydantic.
It must never import from services, commands, or config.
"""
