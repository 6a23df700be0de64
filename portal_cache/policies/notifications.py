"""Per-user notifications and push tokens."""

from portal_cache.keys import PAGE, Filters, Literal, Param, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

RECIPIENT = Param("viewer", source="viewer", required=True)

NOTIFICATIONS = CachePolicy(
    resource="notifications",
    id_param="notificationId",
    views=(
        CacheView(
            "user_list",
            (
                Literal("notifications:user"),
                RECIPIENT,
                Filters(("isRead", "type"), default="all"),
                PAGE,
                limit(20),
            ),
            TTL.VOLATILE,
        ),
        CacheView("unread_count", (Literal("notifications:unread"), RECIPIENT), TTL.LIVE),
        CacheView(
            "details",
            (Literal("notification"), Param("notificationId", required=True)),
            TTL.INTERACTIVE,
            viewer_specific=True,
        ),
        CacheView(
            "analytics",
            (Literal("notifications:analytics"), Param("period", default="7d")),
            TTL.STANDARD,
        ),
        CacheView("tokens", (Literal("notifications:tokens"), RECIPIENT), TTL.DETAIL),
        CacheView("system_stats", (Literal("notifications:system:stats"),), TTL.INTERACTIVE),
    ),
    invalidations={
        "send": (
            "notifications:user:*",
            "notifications:unread:*",
            "notifications:analytics*",
            "notifications:system:*",
        ),
        "read": (
            "notifications:user:{viewerId}:*",
            "notifications:unread:{viewerId}",
            "notification:{notificationId}:*",
        ),
        "delete": (
            "notifications:user:{viewerId}:*",
            "notifications:unread:{viewerId}",
            "notification:{notificationId}:*",
            "notifications:analytics*",
        ),
        "token": ("notifications:tokens:{viewerId}", "notifications:system:*"),
    },
)
