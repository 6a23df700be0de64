"""Polls and votes."""

from portal_cache.keys import PAGE, Filters, Literal, Param, flag, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

POLL_ID = Param("pollId", required=True)
VOTER = Param("viewer", source="viewer", required=True)
POLL_FILTERS = Filters(("search", "status", "type"), default="all")
WITH_RESULTS = Param(
    "includeResults",
    default="false",
    label="results",
    transform=flag("true", "false"),
)

_POLL_CHANGED = (
    "polls:details:{pollId}:*",
    "polls:results:{pollId}",
    "polls:list:*",
    "polls:statistics",
    "polls:active:*",
    "polls:user:*",
)

POLLS = CachePolicy(
    resource="polls",
    id_param="pollId",
    views=(
        CacheView(
            "list",
            (Literal("polls:list"), POLL_FILTERS, PAGE, limit(10)),
            TTL.INTERACTIVE,
        ),
        # Details include whether the caller already voted.
        CacheView(
            "details",
            (Literal("polls:details"), POLL_ID, WITH_RESULTS),
            TTL.SHORT,
            viewer_specific=True,
        ),
        CacheView("results", (Literal("polls:results"), POLL_ID), TTL.VOLATILE),
        CacheView("statistics", (Literal("polls:statistics"),), TTL.STANDARD),
        CacheView("user_polls", (Literal("polls:user"), VOTER, PAGE, limit(10)), TTL.LIST),
        CacheView("user_votes", (Literal("polls:votes:user"), VOTER, PAGE, limit(10)), TTL.LIST),
        CacheView("active", (Literal("polls:active:list"),), TTL.LIST),
    ),
    invalidations={
        "create": ("polls:list:*", "polls:statistics", "polls:active:*", "polls:user:{viewerId}:*"),
        "update": _POLL_CHANGED,
        "delete": _POLL_CHANGED,
        "status": _POLL_CHANGED,
        "vote": (
            "polls:details:{pollId}:*",
            "polls:results:{pollId}",
            "polls:list:*",
            "polls:statistics",
            "polls:votes:user:{viewerId}:*",
        ),
    },
)
