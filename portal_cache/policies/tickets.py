"""Support tickets."""

from portal_cache.keys import PAGE, VIEWER, Filters, Literal, Param, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

TICKET_ID = Param("ticketId", required=True)
MESSAGE_ID = Param("messageId", required=True)
ATTACHMENT_ID = Param("attachmentId", required=True)

TICKET_FILTERS = Filters(("category", "priority", "search", "status"), default="all")

_LISTS_AND_REPORTS = (
    "tickets:user:*",
    "tickets:admin:*",
    "tickets:analytics*",
    "tickets:trends*",
)

TICKETS = CachePolicy(
    resource="tickets",
    id_param="ticketId",
    views=(
        CacheView(
            "user_list",
            (Literal("tickets:user"), VIEWER, TICKET_FILTERS, PAGE, limit(10)),
            TTL.INTERACTIVE,
        ),
        CacheView(
            "admin_list",
            (
                Literal("tickets:admin"),
                TICKET_FILTERS,
                Param("assignedTo", default="anyone", label="assigned"),
                PAGE,
                limit(20),
            ),
            TTL.SHORT,
        ),
        # Ticket details carry the caller's permissions.
        CacheView(
            "detail",
            (Literal("ticket"), TICKET_ID),
            TTL.INTERACTIVE,
            viewer_specific=True,
        ),
        CacheView("categories", (Literal("tickets:categories"),), TTL.DETAIL),
        CacheView(
            "analytics",
            (Literal("tickets:analytics"), Param("period", default="30d")),
            TTL.STANDARD,
        ),
        CacheView("trends", (Literal("tickets:trends"), Param("days", default="30")), TTL.LIST),
        CacheView(
            "audit",
            (Literal("ticket"), TICKET_ID, Literal("audit")),
            TTL.INTERACTIVE,
        ),
        CacheView(
            "message_reactions",
            (Literal("tickets:messages"), MESSAGE_ID, Literal("reactions")),
            TTL.LIST,
        ),
        CacheView(
            "message_history",
            (Literal("tickets:messages"), MESSAGE_ID, Literal("history")),
            TTL.DETAIL,
        ),
        CacheView(
            "file_preview",
            (Literal("tickets:files"), ATTACHMENT_ID, Literal("preview")),
            TTL.STABLE,
        ),
        CacheView(
            "file_metadata",
            (Literal("tickets:files"), ATTACHMENT_ID, Literal("metadata")),
            TTL.AGGREGATE,
        ),
    ),
    invalidations={
        "create": _LISTS_AND_REPORTS,
        "update": ("ticket:{ticketId}:*", *_LISTS_AND_REPORTS),
        "status": ("ticket:{ticketId}:*", *_LISTS_AND_REPORTS),
        "assign": ("ticket:{ticketId}:*", "tickets:admin:*", "tickets:analytics*"),
        "message": (
            "ticket:{ticketId}:*",
            "tickets:messages:{messageId}:*",
            "tickets:user:*",
            "tickets:admin:*",
        ),
        "reaction": ("tickets:messages:{messageId}:reactions",),
        "attachment": ("tickets:files:{attachmentId}:*", "ticket:{ticketId}:*"),
        "delete": ("ticket:{ticketId}:*", *_LISTS_AND_REPORTS),
        "category": ("tickets:categories",),
    },
)
