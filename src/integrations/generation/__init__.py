"""
Media generation package.

Do not import factory/clients here to avoid import-time settings reads.
"""

__all__ = [
    "config",
    "factory",
    "models",
    "openai_client",
    "sinks",
]
