"""
Birthdays and festivals.

The data changes once a day, so day-bound views carry the UTC date in their
key and long TTLs; a new day reads fresh keys without any invalidation.
"""

from portal_cache.keys import Filters, Literal, Param, Today
from portal_cache.policies.base import TTL, CachePolicy, CacheView

CURRENT_YEAR = Param("year", default="current")

_SUMMARIES = ("celebrations:combined:*", "celebrations:summary:*")

CELEBRATIONS = CachePolicy(
    resource="celebrations",
    views=(
        CacheView(
            "birthdays_today",
            (Literal("celebrations:birthdays:today"), Today()),
            TTL.HALF_DAY,
        ),
        CacheView(
            "birthdays_upcoming",
            (Literal("celebrations:birthdays:upcoming"), Param("days", default="7"), Today()),
            TTL.HALF_DAY,
        ),
        CacheView(
            "birthday_stats",
            (Literal("celebrations:birthdays:stats"), Today()),
            TTL.EXTENDED,
        ),
        CacheView(
            "birthday_distribution",
            (Literal("celebrations:birthdays:distribution"),),
            TTL.DAY,
        ),
        CacheView(
            "birthdays_in_month",
            (
                Literal("celebrations:birthdays:month"),
                Param("month", required=True),
                Param("year", required=True),
            ),
            TTL.STABLE,
        ),
        CacheView(
            "festivals_today",
            (Literal("celebrations:festivals:today"), Today()),
            TTL.HALF_DAY,
        ),
        CacheView(
            "festivals_upcoming",
            (Literal("celebrations:festivals:upcoming"), Param("days", default="30"), Today()),
            TTL.HALF_DAY,
        ),
        CacheView(
            "festival_stats",
            (Literal("celebrations:festivals:stats"), CURRENT_YEAR),
            TTL.EXTENDED,
        ),
        CacheView(
            "festival_calendar",
            (Literal("celebrations:festivals:calendar"), CURRENT_YEAR),
            TTL.DAY,
        ),
        CacheView(
            "festival_search",
            (
                Literal("celebrations:festivals:search"),
                Param("q", default="all"),
                Filters(("festivalType", "limit", "priority", "religion", "year")),
            ),
            TTL.STABLE,
        ),
        CacheView("today", (Literal("celebrations:combined:today"), Today()), TTL.HALF_DAY),
        CacheView("summary", (Literal("celebrations:summary"), Today()), TTL.EXTENDED),
    ),
    invalidations={
        "birthday": ("celebrations:birthdays:*", *_SUMMARIES),
        "festival": ("celebrations:festivals:*", *_SUMMARIES),
        "all": ("celebrations:*",),
    },
)
