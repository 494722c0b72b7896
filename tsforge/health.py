"""Health endpoint pass-through."""

from .base_client import BaseClient
from .models import CacheStatus, ClearCacheResult, HealthStatus


class HealthClient:
    """Reads the backend's operational status."""

    def __init__(self, client: BaseClient):
        self.client = client

    def check_health(self) -> HealthStatus:
        return HealthStatus.model_validate(self.client.request("/health"))

    def check_ping(self) -> str:
        return str(self.client.request("/health/ping"))

    def check_cache(self) -> CacheStatus:
        return CacheStatus.model_validate(self.client.request("/health/cache"))

    def clear_cache(self) -> ClearCacheResult:
        return ClearCacheResult.model_validate(self.client.request("/health/clear-cache", method="POST"))
