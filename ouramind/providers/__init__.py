from ouramind.providers.base import BaseClassifierProvider
from ouramind.providers.watson_provider import WatsonProvider


__all__ = [
    "BaseClassifierProvider",
    "WatsonProvider",
]
