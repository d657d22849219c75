"""Remote collaborators of the round engine."""

from client.provably_fair import ProvablyFairClient, ServiceError
from client.table import TableController

__all__ = [
    "ProvablyFairClient",
    "ServiceError",
    "TableController",
]
