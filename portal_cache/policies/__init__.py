"""Cache policies for every portal resource."""

from portal_cache.policies.base import TTL, CachePolicy, CacheView, PolicyRegistry
from portal_cache.policies.celebrations import CELEBRATIONS
from portal_cache.policies.events import EVENTS
from portal_cache.policies.feedback import FEEDBACK
from portal_cache.policies.groups import GROUPS
from portal_cache.policies.lifelink import LIFELINK
from portal_cache.policies.merchandise import MERCHANDISE
from portal_cache.policies.notifications import NOTIFICATIONS
from portal_cache.policies.payments import PAYMENTS
from portal_cache.policies.photos import PHOTOS
from portal_cache.policies.polls import POLLS
from portal_cache.policies.posts import POSTS
from portal_cache.policies.sponsors import SPONSORS
from portal_cache.policies.tickets import TICKETS
from portal_cache.policies.treasury import TREASURY
from portal_cache.policies.users import ALUMNI, BATCHES, USERS

ALL_POLICIES: tuple[CachePolicy, ...] = (
    USERS,
    ALUMNI,
    BATCHES,
    POSTS,
    EVENTS,
    TICKETS,
    POLLS,
    GROUPS,
    NOTIFICATIONS,
    MERCHANDISE,
    FEEDBACK,
    LIFELINK,
    SPONSORS,
    PHOTOS,
    TREASURY,
    PAYMENTS,
    CELEBRATIONS,
)


def default_registry() -> PolicyRegistry:
    """Return a fresh registry holding every built-in policy."""
    return PolicyRegistry(ALL_POLICIES)


registry = default_registry()

__all__ = [
    "ALL_POLICIES",
    "TTL",
    "CachePolicy",
    "CacheView",
    "PolicyRegistry",
    "default_registry",
    "registry",
]
