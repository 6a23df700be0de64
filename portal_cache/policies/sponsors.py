from portal_cache.keys import PAGE, Filters, Literal, Param, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

SPONSORS = CachePolicy(
    resource="sponsors",
    id_param="sponsorId",
    views=(
        CacheView(
            "list",
            (
                Literal("sponsors:list"),
                Filters(("category", "search", "status"), default="all"),
                PAGE,
                limit(10),
            ),
            TTL.INTERACTIVE,
        ),
        CacheView("details", (Literal("sponsor"), Param("sponsorId", required=True)), TTL.LIST),
        CacheView("stats", (Literal("sponsors:stats"),), TTL.STANDARD),
        CacheView("public", (Literal("sponsors:public"),), TTL.DETAIL),
        CacheView(
            "by_category",
            (Literal("sponsors:category"), Param("category", required=True)),
            TTL.RELAXED,
        ),
    ),
    invalidations={
        "create": ("sponsors:*",),
        "update": ("sponsor:{sponsorId}", "sponsors:*"),
        "delete": ("sponsor:{sponsorId}", "sponsors:*"),
    },
)
