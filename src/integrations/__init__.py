"""
Provider integrations: Twilio messaging provisioning and OpenAI media generation.

Keep package import side-effects to a minimum: do not import clients here.
"""

__all__ = ["config", "messaging", "generation", "shared"]
