"""User profiles, the alumni directory and graduation batches."""

from portal_cache.keys import PAGE, Filters, Literal, Param, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

USER_ID = Param("userId", required=True)
OWN_ID = Param("viewer", source="viewer", required=True)
YEAR = Param("year", required=True)

USERS = CachePolicy(
    resource="users",
    id_param="userId",
    views=(
        CacheView("profile", (Literal("user:profile"), USER_ID), TTL.DETAIL),
        CacheView("own_profile", (Literal("user:profile"), OWN_ID), TTL.DETAIL),
        CacheView("posts", (Literal("user:posts"), USER_ID, PAGE, limit(10)), TTL.STANDARD),
    ),
    invalidations={
        # A profile change also shows up in the alumni directory and its stats.
        "update": (
            "user:profile:{userId}",
            "user:posts:{userId}:*",
            "user:profile:{viewerId}",
            "user:posts:{viewerId}:*",
            "alumni:*",
        ),
        "delete": ("user:profile:{userId}", "user:posts:{userId}:*", "alumni:*"),
    },
)

ALUMNI = CachePolicy(
    resource="alumni",
    views=(
        CacheView(
            "directory",
            (
                Literal("alumni:directory"),
                Filters(("batch", "city", "employmentStatus", "search")),
                Param("sortBy", default="fullName", label="sort"),
                Param("sortOrder", default="asc"),
                PAGE,
                limit(20),
            ),
            TTL.RELAXED,
        ),
        CacheView("stats", (Literal("alumni:stats"),), TTL.DASHBOARD),
    ),
    invalidations={
        "update": ("alumni:*",),
    },
)

BATCHES = CachePolicy(
    resource="batches",
    id_param="year",
    views=(
        CacheView("detail", (Literal("batch"), YEAR), TTL.STABLE),
        CacheView("members", (Literal("batch:members"), YEAR, PAGE, limit(20)), TTL.STABLE),
        CacheView("stats", (Literal("batch:stats"), YEAR), TTL.AGGREGATE),
    ),
    invalidations={
        "update": (
            "batch:{year}",
            "batch:members:{year}:*",
            "batch:stats:{year}",
            "alumni:stats",
        ),
        "members": ("batch:members:{year}:*", "batch:stats:{year}", "alumni:*"),
    },
)
