from gmtbot_client.cache import EntityCache
from gmtbot_client.client import ApiClient, ApiError

__all__ = ["ApiClient", "ApiError", "EntityCache"]
