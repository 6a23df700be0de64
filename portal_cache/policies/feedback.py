"""Event feedback forms and their responses."""

from portal_cache.keys import PAGE, Filters, Literal, Param, limit
from portal_cache.policies.base import TTL, CachePolicy, CacheView

FORM_ID = Param("formId", required=True)
STATUS = Filters(("status",), default="all")

FEEDBACK = CachePolicy(
    resource="feedback",
    id_param="formId",
    views=(
        CacheView("form", (Literal("feedback:form"), FORM_ID), TTL.STABLE),
        CacheView(
            "responses",
            (Literal("feedback:responses"), FORM_ID, STATUS, PAGE, limit(20)),
            TTL.INTERACTIVE,
        ),
        CacheView("analytics", (Literal("feedback:analytics"), FORM_ID), TTL.AGGREGATE),
        CacheView(
            "export",
            (Literal("feedback:export"), FORM_ID, Param("format", default="json")),
            TTL.STABLE,
        ),
        CacheView(
            "user_feedback",
            (Literal("feedback:user"), Param("viewer", source="viewer", required=True), FORM_ID),
            TTL.LIST,
        ),
    ),
    invalidations={
        "update": (
            "feedback:form:{formId}",
            "feedback:responses:{formId}:*",
            "feedback:analytics:{formId}",
            "feedback:export:{formId}:*",
        ),
        "submit": (
            "feedback:responses:{formId}:*",
            "feedback:analytics:{formId}",
            "feedback:export:{formId}:*",
            "feedback:user:{viewerId}:*",
        ),
        "delete": (
            "feedback:form:{formId}",
            "feedback:responses:{formId}:*",
            "feedback:analytics:{formId}",
            "feedback:export:{formId}:*",
            "feedback:user:*",
        ),
    },
)
