from portal_cache.monitoring.prometheus import MetricsCollector, metrics, setup_prometheus

__all__ = ["MetricsCollector", "metrics", "setup_prometheus"]
