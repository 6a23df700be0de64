"""Alumni feed posts, their comments and likes."""

from portal_cache.keys import PAGE, VIEWER, Literal, Param, flag, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

POST_ID = Param("postId", required=True)

POST_LIST = (
    Literal("posts"),
    Param("category", default="all"),
    Param("status", default="published"),
    Param("archived", default="notarchived", transform=flag("archived", "notarchived")),
    Param("search", default="nosearch"),
    VIEWER,
    Param("sortBy", default="createdAt", label="sort"),
    Param("sortOrder", default="desc"),
    Param("startDate", default="nostart", label="date"),
    Param("endDate", default="noend"),
    Param("tags", default="notags", label="tags"),
    PAGE,
    limit(10),
)

POSTS = CachePolicy(
    resource="posts",
    id_param="postId",
    views=(
        CacheView("list", POST_LIST, TTL.INTERACTIVE),
        CacheView("detail", (Literal("post"), POST_ID), TTL.DETAIL),
        CacheView("comments", (Literal("post:comments"), POST_ID, PAGE, limit(10)), TTL.RELAXED),
        CacheView("likes", (Literal("post:likes"), POST_ID, PAGE, limit(20)), TTL.STANDARD),
    ),
    invalidations={
        "create": ("posts:*", "user:posts:{authorId}:*", "user:posts:{viewerId}:*"),
        "update": (
            "post:{postId}",
            "posts:*",
            "post:comments:{postId}:*",
            "post:likes:{postId}:*",
            "user:posts:{authorId}:*",
        ),
        "delete": (
            "post:{postId}",
            "posts:*",
            "post:comments:{postId}:*",
            "post:likes:{postId}:*",
            "user:posts:{authorId}:*",
        ),
        "status": ("post:{postId}", "posts:*", "user:posts:{authorId}:*"),
        "interaction": ("post:{postId}", "post:comments:{postId}:*", "post:likes:{postId}:*"),
    },
)
