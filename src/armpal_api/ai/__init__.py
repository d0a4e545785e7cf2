"""AI client management for the ArmPal API."""
from .client_factory import AIClientFactory, AIRequestContext

__all__ = [
    "AIClientFactory",
    "AIRequestContext",
]
