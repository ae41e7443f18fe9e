from typing import Optional, Dict, Any


class NewsHubError(Exception):
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(NewsHubError):
    """A provider was constructed without its required credential."""

    def __init__(self, service: str, missing_key: str):
        self.service = service
        self.missing_key = missing_key
        super().__init__(
            message=f"API configuration missing for {service}. Please set {missing_key} in your environment file.",
            error_code="CONFIGURATION_ERROR",
            details={"service": service, "missing_key": missing_key}
        )


class ProviderError(NewsHubError):
    """An external news provider answered with a non-2xx status or could not be reached."""

    def __init__(self, provider: str, message: str, status_code: int = 0):
        self.provider = provider
        self.status_code = status_code
        super().__init__(
            message=f"News Provider [{provider}]: {message}",
            error_code="PROVIDER_ERROR",
            details={"provider": provider, "status_code": status_code}
        )


class PersistenceSkip(NewsHubError):
    def __init__(self, external_id: Optional[str], reason: str):
        self.external_id = external_id
        self.reason = reason
        super().__init__(
            message=f"Article {external_id} skipped: {reason}",
            error_code="PERSISTENCE_SKIP",
            details={"external_id": external_id, "reason": reason}
        )


class CacheDegraded(NewsHubError):
    """The cache backend cannot delete by prefix; callers fall back to a full flush."""

    def __init__(self, backend: str):
        self.backend = backend
        super().__init__(
            message=f"Cache backend {backend} does not support prefix invalidation",
            error_code="CACHE_DEGRADED",
            details={"backend": backend}
        )


class StorageError(NewsHubError):
    pass


class ArticleNotFoundError(NewsHubError):
    def __init__(self, article_id: int):
        super().__init__(
            message=f"Article {article_id} not found",
            error_code="ARTICLE_NOT_FOUND",
            details={"article_id": article_id}
        )
