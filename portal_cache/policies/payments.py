"""Payments: a member's own history, transaction status, invoices and the admin reports."""

from portal_cache.keys import PAGE, Filters, Literal, Param, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

TRANSACTION_ID = Param("transactionId", required=True)

_TRANSACTION = (
    "payment:transaction:{transactionId}",
    "payment:status:{transactionId}",
    "payment:invoice:{transactionId}",
)

PAYMENTS = CachePolicy(
    resource="payments",
    id_param="transactionId",
    views=(
        CacheView(
            "user_payments",
            (
                Literal("user"),
                Param("viewer", source="viewer", required=True),
                Literal("payments"),
                PAGE,
                limit(10),
                Filters(("referenceType", "status")),
            ),
            TTL.INTERACTIVE,
        ),
        # Polled while a gateway redirect completes.
        CacheView("status", (Literal("payment:status"), TRANSACTION_ID), TTL.LIVE),
        CacheView(
            "calculation",
            (
                Literal("payment:calculation"),
                Param("referenceType", required=True),
                Param("referenceId", required=True),
            ),
            TTL.VOLATILE,
        ),
        CacheView(
            "admin_list",
            (
                Literal("admin:payments"),
                PAGE,
                limit(10),
                Filters(("fromDate", "provider", "referenceType", "search", "status", "toDate")),
            ),
            TTL.SHORT,
        ),
        CacheView(
            "analytics",
            (
                Literal("admin:payments:analytics"),
                Filters(("fromDate", "toDate"), default="all"),
                Param("groupBy", default="day"),
            ),
            TTL.LIST,
        ),
        CacheView("invoice", (Literal("payment:invoice"), TRANSACTION_ID), TTL.STABLE),
        CacheView("transaction", (Literal("payment:transaction"), TRANSACTION_ID), TTL.DETAIL),
    ),
    invalidations={
        "initiate": (
            "user:{viewerId}:payments:*",
            "payment:calculation:{referenceType}:{referenceId}",
            "admin:payments:*",
        ),
        "verify": (*_TRANSACTION, "user:{viewerId}:payments:*", "admin:payments:*"),
        # Gateway callbacks carry no session; the payer comes from ``related``.
        "webhook": (*_TRANSACTION, "user:{userId}:payments:*", "admin:payments:*"),
        "update": (*_TRANSACTION, "user:{userId}:payments:*", "admin:payments:*"),
    },
)
