from .player import Player
from .provider import Provider
from .third_party_identity import ThirdPartyIdentity

__all__ = [
    "Player",
    "Provider",
    "ThirdPartyIdentity",
]
