"""Tenant-aware response caching for the alumni portal API."""
