from portal_cache.keys import PAGE, Filters, Literal, Param, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

GROUP_ID = Param("groupId", required=True)
GROUP_FILTERS = Filters(("isActive", "search", "type"), default="all")
ROLE = Filters(("role",), default="all")

GROUPS = CachePolicy(
    resource="groups",
    id_param="groupId",
    views=(
        CacheView(
            "list",
            (Literal("groups:list"), GROUP_FILTERS, PAGE, limit(10)),
            TTL.INTERACTIVE,
        ),
        CacheView("details", (Literal("group"), GROUP_ID), TTL.SHORT),
        CacheView(
            "members",
            (Literal("group"), GROUP_ID, Literal("members"), ROLE, PAGE, limit(20)),
            TTL.INTERACTIVE,
        ),
        CacheView("stats", (Literal("groups:stats"),), TTL.STANDARD),
        CacheView("public", (Literal("groups:public"), Param("type", default="all")), TTL.DETAIL),
    ),
    invalidations={
        "create": ("groups:*",),
        "update": ("group:{groupId}", "group:{groupId}:*", "groups:*"),
        "delete": ("group:{groupId}", "group:{groupId}:*", "groups:*"),
        "members": (
            "group:{groupId}",
            "group:{groupId}:members:*",
            "groups:stats",
            "groups:public:*",
        ),
    },
)
