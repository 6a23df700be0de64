from portal_cache.routes.cache import router as cache_router

__all__ = ["cache_router"]
