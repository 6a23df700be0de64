"""Photo albums."""

from portal_cache.keys import PAGE, Filters, Literal, Param, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

ALBUM_ID = Param("albumId", required=True)
ALBUM_FILTERS = Filters(("batch", "search"), default="all")

PHOTOS = CachePolicy(
    resource="photos",
    id_param="albumId",
    views=(
        CacheView(
            "albums",
            (Literal("photos:albums"), ALBUM_FILTERS, PAGE, limit(12)),
            TTL.LIST,
        ),
        CacheView("album", (Literal("photos:album"), ALBUM_ID), TTL.DETAIL),
        CacheView(
            "album_photos",
            (Literal("photos:album"), ALBUM_ID, Literal("photos"), PAGE, limit(24)),
            TTL.LIST,
        ),
        CacheView("photo", (Literal("photos:photo"), Param("photoId", required=True)), TTL.DETAIL),
        CacheView("stats", (Literal("photos:stats"),), TTL.STABLE),
    ),
    invalidations={
        "album": (
            "photos:albums:*",
            "photos:album:{albumId}",
            "photos:album:{albumId}:*",
            "photos:stats",
        ),
        "photo": (
            "photos:photo:{photoId}",
            "photos:album:{albumId}",
            "photos:album:{albumId}:photos:*",
            "photos:stats",
        ),
    },
)
