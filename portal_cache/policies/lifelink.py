"""
LifeLink blood-donor network.

Donor dashboards, profiles and statuses are per donor; search and
discovery lists are shared by the tenant and go stale whenever any donor
changes availability.
"""

from portal_cache.keys import PAGE, Filters, Literal, Param, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

DONOR = Param("viewer", source="viewer", required=True)
REQUISITION_ID = Param("requisitionId", required=True)
DONOR_FILTERS = Filters(("available", "bloodGroup", "city"), default="all")

_DONOR_CHANGED = (
    "lifelink:dashboard:{viewerId}",
    "lifelink:status:{viewerId}",
    "lifelink:search:*",
    "lifelink:discover:*",
    "lifelink:stats:*",
)

LIFELINK = CachePolicy(
    resource="lifelink",
    id_param="requisitionId",
    views=(
        CacheView("dashboard", (Literal("lifelink:dashboard"), DONOR), TTL.LIST),
        CacheView("profile", (Literal("lifelink:profile"), DONOR), TTL.DETAIL),
        CacheView(
            "donations",
            (Literal("lifelink:donations"), DONOR, PAGE, limit(10)),
            TTL.STANDARD,
        ),
        CacheView("status", (Literal("lifelink:status"), DONOR), TTL.INTERACTIVE),
        CacheView(
            "search",
            (Literal("lifelink:search"), DONOR_FILTERS, PAGE, limit(20)),
            TTL.SHORT,
        ),
        CacheView("discover", (Literal("lifelink:discover"), DONOR_FILTERS), TTL.SHORT),
        CacheView("bloodgroup_stats", (Literal("lifelink:stats:bloodgroups"),), TTL.STABLE),
        CacheView(
            "requisition",
            (Literal("lifelink:requisition"), REQUISITION_ID),
            TTL.INTERACTIVE,
        ),
        CacheView(
            "user_requisitions",
            (Literal("lifelink:requisitions:user"), DONOR, PAGE, limit(10)),
            TTL.LIST,
        ),
        CacheView(
            "notifications",
            (Literal("lifelink:notifications"), DONOR, PAGE, limit(20)),
            TTL.VOLATILE,
        ),
        CacheView("willing_donors", (Literal("lifelink:willing"), REQUISITION_ID), TTL.SHORT),
    ),
    invalidations={
        "donation": ("lifelink:donations:{viewerId}:*", *_DONOR_CHANGED),
        "profile": ("lifelink:profile:{viewerId}", *_DONOR_CHANGED),
        "requisition": (
            "lifelink:requisition:{requisitionId}",
            "lifelink:requisitions:user:{viewerId}:*",
            "lifelink:willing:{requisitionId}",
            "lifelink:notifications:*",
        ),
        "response": (
            "lifelink:willing:{requisitionId}",
            "lifelink:requisition:{requisitionId}",
            "lifelink:notifications:{viewerId}:*",
        ),
    },
)
