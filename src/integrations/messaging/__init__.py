"""
Messaging provisioning package.

Do not import factory/clients here to avoid import-time settings reads.
"""

__all__ = [
    "accounts",
    "config",
    "factory",
    "interface",
    "mock_client",
    "numbers",
    "twilio_client",
]
