from rfstore.client.api import StoreApiClient
from rfstore.client.auth import AuthService

__all__ = ["AuthService", "StoreApiClient"]
