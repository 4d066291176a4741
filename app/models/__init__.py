from app.models.github_account import GitHubAccount
from app.models.project import Project
from app.models.backlink import Backlink
from app.models.expense import Expense
from app.models.link_resource import LinkResource
from app.models.enums import (
    ProjectStatus,
    AdsenseStatus,
    BacklinkStatus,
    ExpenseCategory,
    ResourceType,
    ResourceStatus,
)

__all__ = [
    "GitHubAccount",
    "Project",
    "Backlink",
    "Expense",
    "LinkResource",
    "ProjectStatus",
    "AdsenseStatus",
    "BacklinkStatus",
    "ExpenseCategory",
    "ResourceType",
    "ResourceStatus",
]
