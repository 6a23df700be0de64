"""Portal-wide merchandise store: catalog, carts and orders."""

from portal_cache.keys import PAGE, Filters, Literal, Param, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

BUYER = Param("viewer", source="viewer", required=True)
ITEM_ID = Param("itemId", required=True)

_ITEM_CHANGED = (
    "merchandise:catalog:*",
    "merchandise:item:{itemId}",
    "merchandise:stats*",
    "merchandise:stock:*",
    "merchandise:cart:*",
)

MERCHANDISE = CachePolicy(
    resource="merchandise",
    id_param="itemId",
    views=(
        CacheView(
            "catalog",
            (
                Literal("merchandise:catalog"),
                Filters(("category", "inStock", "search"), default="all"),
                PAGE,
                limit(12),
            ),
            TTL.LIST,
        ),
        CacheView("item", (Literal("merchandise:item"), ITEM_ID), TTL.DETAIL),
        CacheView("cart", (Literal("merchandise:cart"), BUYER), TTL.INTERACTIVE),
        CacheView(
            "orders",
            (
                Literal("merchandise:orders:user"),
                BUYER,
                Filters(("status",), default="all"),
                PAGE,
                limit(10),
            ),
            TTL.INTERACTIVE,
        ),
        CacheView(
            "order",
            (Literal("merchandise:order"), Param("orderId", required=True)),
            TTL.INTERACTIVE,
            viewer_specific=True,
        ),
        CacheView("stats", (Literal("merchandise:stats"),), TTL.STABLE),
        CacheView("category_stats", (Literal("merchandise:stats:categories"),), TTL.STABLE),
        CacheView(
            "admin_orders",
            (
                Literal("merchandise:admin:orders"),
                Filters(("search", "status"), default="all"),
                PAGE,
                limit(20),
            ),
            TTL.SHORT,
        ),
        CacheView("stock_alerts", (Literal("merchandise:stock:alerts"),), TTL.INTERACTIVE),
    ),
    invalidations={
        # Item changes reach the catalog, the stats and every cart holding the item.
        "create": _ITEM_CHANGED,
        "update": _ITEM_CHANGED,
        "delete": _ITEM_CHANGED,
        "stock": ("merchandise:item:{itemId}", "merchandise:catalog:*", "merchandise:stock:*"),
        "cart": ("merchandise:cart:{viewerId}",),
        "order": (
            "merchandise:cart:{viewerId}",
            "merchandise:orders:user:{viewerId}:*",
            "merchandise:admin:orders:*",
            "merchandise:stats*",
            "merchandise:stock:*",
            "merchandise:catalog:*",
        ),
        "order_status": (
            "merchandise:order:{orderId}:*",
            "merchandise:orders:user:*",
            "merchandise:admin:orders:*",
            "merchandise:stats*",
        ),
    },
)
