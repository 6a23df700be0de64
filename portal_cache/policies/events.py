"""
Events: categories, listings, detail pages, registrations, guests and the
merchandise sold alongside an event.

Most per-event views share the ``event:{eventId}:`` prefix, so a single
``event:{eventId}:*`` pattern drops everything derived from one event.
"""

from portal_cache.keys import PAGE, Filters, Literal, Param, flag, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

EVENT_ID = Param("eventId", required=True)
REGISTRATION_ID = Param("registrationId", required=True)
CATEGORY_ID = Param("categoryId", required=True)
ITEM_ID = Param("itemId", required=True)
ADMIN_FILTERS = Filters(("paymentStatus", "search", "status"), default="all")

_EVENT_CHANGED = (
    "event:{eventId}",
    "event:slug:{slug}",
    "event:{eventId}:*",
    "events:list:*",
    "admin:events:*",
    "event:category:{categoryId}:*",
)

EVENTS = CachePolicy(
    resource="events",
    id_param="eventId",
    views=(
        CacheView(
            "categories",
            (
                Literal("event:categories"),
                Param("includeInactive", default="active", transform=flag("all", "active")),
            ),
            TTL.AGGREGATE,
        ),
        CacheView("category", (Literal("event:category"), CATEGORY_ID), TTL.STABLE),
        CacheView(
            "category_events",
            (
                Literal("event:category"),
                CATEGORY_ID,
                Literal("events"),
                PAGE,
                limit(10),
            ),
            TTL.STANDARD,
        ),
        CacheView(
            "list",
            (
                Literal("events:list"),
                Filters(("category", "eventMode", "search", "status", "upcoming"), default="all"),
                PAGE,
                limit(10),
            ),
            TTL.LIST,
        ),
        CacheView("detail", (Literal("event"), EVENT_ID), TTL.DETAIL),
        CacheView("by_slug", (Literal("event:slug"), Param("slug", required=True)), TTL.DETAIL),
        CacheView(
            "sections",
            (
                Literal("event"),
                EVENT_ID,
                Literal("sections"),
                Param("includeHidden", default="visible", transform=flag("all", "visible")),
            ),
            TTL.STABLE,
        ),
        CacheView(
            "section",
            (Literal("event"), EVENT_ID, Literal("section"), Param("sectionId", required=True)),
            TTL.STABLE,
        ),
        CacheView("stats", (Literal("event"), EVENT_ID, Literal("stats")), TTL.INTERACTIVE),
        CacheView(
            "registration_count",
            (Literal("event"), EVENT_ID, Literal("registration:count")),
            TTL.VOLATILE,
        ),
        CacheView(
            "registration_stats",
            (Literal("event"), EVENT_ID, Literal("registration:stats")),
            TTL.INTERACTIVE,
        ),
        CacheView(
            "registrations",
            (
                Literal("admin:event"),
                EVENT_ID,
                Literal("registrations"),
                ADMIN_FILTERS,
                PAGE,
                limit(20),
            ),
            TTL.SHORT,
        ),
        CacheView(
            "guests",
            (Literal("admin:event"), EVENT_ID, Literal("guests"), ADMIN_FILTERS, PAGE, limit(20)),
            TTL.SHORT,
        ),
        CacheView(
            "guest_stats",
            (Literal("event"), EVENT_ID, Literal("guest:stats")),
            TTL.INTERACTIVE,
        ),
        CacheView("form", (Literal("event"), EVENT_ID, Literal("form")), TTL.STABLE),
        CacheView(
            "admin_list",
            (Literal("admin:events"), Param("status", default="all")),
            TTL.STANDARD,
        ),
        CacheView("dashboard", (Literal("admin:events:dashboard"),), TTL.STANDARD),
        CacheView(
            "merchandise",
            (
                Literal("event"),
                EVENT_ID,
                Literal("merchandise"),
                Param("includeInactive", default="active", transform=flag("all", "active")),
            ),
            TTL.LIST,
        ),
        CacheView(
            "merchandise_item",
            (Literal("event"), EVENT_ID, Literal("merchandise:item"), ITEM_ID),
            TTL.DETAIL,
        ),
        CacheView(
            "merchandise_stats",
            (Literal("event"), EVENT_ID, Literal("merchandise:stats")),
            TTL.INTERACTIVE,
        ),
        CacheView(
            "cart",
            (Literal("registration"), REGISTRATION_ID, Literal("cart")),
            TTL.INTERACTIVE,
        ),
        CacheView(
            "orders",
            (Literal("registration"), REGISTRATION_ID, Literal("orders")),
            TTL.INTERACTIVE,
        ),
        CacheView(
            "admin_orders",
            (
                Literal("admin:event"),
                EVENT_ID,
                Literal("orders"),
                PAGE,
                Param("search", default="nosearch", label="search"),
            ),
            TTL.SHORT,
        ),
    ),
    invalidations={
        "create": ("events:list:*", "admin:events:*", "event:category:{categoryId}:*"),
        "update": _EVENT_CHANGED,
        "delete": _EVENT_CHANGED,
        "status": _EVENT_CHANGED,
        "category": ("event:categories:*", "event:category:*", "events:list:*"),
        "section": ("event:{eventId}:section*", "event:{eventId}"),
        "form": ("event:{eventId}:form*",),
        # Registrations move the event counters and the admin dashboard.
        "registration": (
            "event:{eventId}",
            "event:{eventId}:stats",
            "event:{eventId}:registration:*",
            "admin:event:{eventId}:registrations:*",
            "admin:events:*",
        ),
        "guest": (
            "event:{eventId}:guest:*",
            "admin:event:{eventId}:guests:*",
            "event:{eventId}:registration:stats",
        ),
        "merchandise": (
            "event:{eventId}:merchandise:*",
            "admin:event:{eventId}:orders:*",
        ),
        "cart": (
            "registration:{registrationId}:cart",
            "registration:{registrationId}:orders",
            "event:{eventId}:merchandise:stats",
        ),
        "order": (
            "registration:{registrationId}:cart",
            "registration:{registrationId}:orders",
            "admin:event:{eventId}:orders:*",
            "event:{eventId}:merchandise:stats",
            "event:{eventId}:registration:stats",
        ),
    },
)
