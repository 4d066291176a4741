from enum import Enum


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"
    DEAD = "dead"
    INCUBATING = "incubating"


class AdsenseStatus(str, Enum):
    NONE = "none"
    REVIEWING = "reviewing"
    REJECTED = "rejected"
    ACTIVE = "active"
    LIMITED = "limited"
    BANNED = "banned"


class BacklinkStatus(str, Enum):
    PLANNED = "planned"
    OUTREACH = "outreach"
    LIVE = "live"
    REMOVED = "removed"


class ExpenseCategory(str, Enum):
    SUBSCRIPTION = "subscription"
    DOMAIN = "domain"
    HOSTING = "hosting"
    MARKETING = "marketing"
    TOOL = "tool"
    OTHER = "other"


# Display labels for the category pie chart. Custom categories fall back to
# their raw value.
EXPENSE_CATEGORY_LABELS = {
    ExpenseCategory.SUBSCRIPTION.value: "Subscription",
    ExpenseCategory.DOMAIN.value: "Domain",
    ExpenseCategory.HOSTING.value: "Hosting",
    ExpenseCategory.MARKETING.value: "Marketing",
    ExpenseCategory.TOOL.value: "Tool",
    ExpenseCategory.OTHER.value: "Other",
}


class ResourceType(str, Enum):
    PROFILE = "profile"
    GUEST_POST = "guest_post"
    DIRECTORY = "directory"
    FORUM = "forum"
    COMMENT = "comment"
    SOCIAL = "social"
    OTHER = "other"


class ResourceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
