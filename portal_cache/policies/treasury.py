"""
Treasury: categories, expenses, collections, balances and reports.

Every money movement reaches the dashboard and the analytics views, so each
mutation below ends with ``_DASHBOARD``.
"""

from portal_cache.keys import PAGE, Filters, Literal, Param, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

CATEGORY_ID = Param("categoryId", required=True)
YEAR = Param("year", default="all")
DATE_RANGE = Filters(("fromDate", "toDate"), default="all")
LIST_FILTERS = Filters(exclude=("page", "limit"))

_DASHBOARD = ("treasury:dashboard:*", "treasury:analytics:*")

TREASURY = CachePolicy(
    resource="treasury",
    views=(
        CacheView("dashboard", (Literal("treasury:dashboard"), YEAR), TTL.INTERACTIVE),
        CacheView(
            "analytics_collections",
            (Literal("treasury:analytics:collections"), DATE_RANGE),
            TTL.LIST,
        ),
        CacheView(
            "analytics_expenses",
            (Literal("treasury:analytics:expenses"), DATE_RANGE),
            TTL.LIST,
        ),
        CacheView(
            "trends",
            (Literal("treasury:analytics:trends"), Param("months", default="12")),
            TTL.LIST,
        ),
        CacheView("yearly_summary", (Literal("treasury:analytics:yearly"), YEAR), TTL.LIST),
        CacheView("categories", (Literal("treasury:categories"),), TTL.STABLE),
        CacheView("category", (Literal("treasury:category"), CATEGORY_ID), TTL.STABLE),
        CacheView("subcategories", (Literal("treasury:subcategories"), CATEGORY_ID), TTL.STABLE),
        CacheView(
            "subcategory",
            (Literal("treasury:subcategory"), Param("subcategoryId", required=True)),
            TTL.STABLE,
        ),
        CacheView("structure", (Literal("treasury:structure"),), TTL.DETAIL),
        CacheView("yearly_balances", (Literal("treasury:yearly-balances"),), TTL.DETAIL),
        CacheView(
            "yearly_balance",
            (Literal("treasury:yearly-balance"), Param("year", required=True)),
            TTL.DETAIL,
        ),
        CacheView("account_balance", (Literal("treasury:account-balance"),), TTL.INTERACTIVE),
        CacheView(
            "balance_history",
            (Literal("treasury:balance-history"), Param("months", default="12")),
            TTL.INTERACTIVE,
        ),
        CacheView(
            "expenses",
            (Literal("treasury:expenses"), LIST_FILTERS, PAGE, limit(20)),
            TTL.LIST,
        ),
        CacheView(
            "expense",
            (Literal("treasury:expense"), Param("expenseId", required=True)),
            TTL.DETAIL,
        ),
        CacheView(
            "collections",
            (Literal("treasury:collections"), LIST_FILTERS, PAGE, limit(20)),
            TTL.LIST,
        ),
        CacheView(
            "collection",
            (Literal("treasury:collection"), Param("collectionId", required=True)),
            TTL.DETAIL,
        ),
        CacheView(
            "financial_report",
            (Literal("treasury:report"), YEAR, Param("format", default="json")),
            TTL.STABLE,
        ),
        CacheView(
            "category_report",
            (Literal("treasury:category-report"), CATEGORY_ID, YEAR),
            TTL.STABLE,
        ),
        CacheView(
            "export",
            (Literal("treasury:export"), Param("type", required=True), LIST_FILTERS),
            TTL.DETAIL,
        ),
    ),
    invalidations={
        "category": (
            "treasury:categories",
            "treasury:structure",
            "treasury:subcategories:*",
            "treasury:category:{categoryId}",
            "treasury:category-report:{categoryId}:*",
            *_DASHBOARD,
        ),
        "subcategory": (
            "treasury:subcategories:{categoryId}",
            "treasury:subcategory:{subcategoryId}",
            "treasury:structure",
            *_DASHBOARD,
        ),
        "expense": (
            "treasury:expenses:*",
            "treasury:expense:{expenseId}",
            "treasury:report:*",
            "treasury:category-report:*",
            "treasury:export:*",
            *_DASHBOARD,
        ),
        "collection": (
            "treasury:collections:*",
            "treasury:collection:{collectionId}",
            "treasury:report:*",
            "treasury:export:*",
            *_DASHBOARD,
        ),
        "balance": (
            "treasury:account-balance",
            "treasury:balance-history:*",
            "treasury:yearly-balances",
            "treasury:yearly-balance:*",
            *_DASHBOARD,
        ),
        "dashboard": _DASHBOARD,
        "all": ("treasury:*",),
    },
)
