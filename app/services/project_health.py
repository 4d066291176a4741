"""
Health colouring for portfolio projects.

danger:  domain expires in < 15 days, AdSense banned, or no update for > 60 days
warning: domain expires in < 30 days, no update for > 14 days, or AdSense limited
good:    everything else
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from app.models.enums import AdsenseStatus

DOMAIN_DANGER_DAYS = 15
DOMAIN_WARNING_DAYS = 30
STALE_DANGER_DAYS = 60
STALE_WARNING_DAYS = 14


@dataclass
class HealthReport:
    status: str
    reasons: List[str] = field(default_factory=list)


def _days_between(earlier: datetime, later: datetime) -> int:
    return (later - earlier).days


def assess_project_health(
    domain_expiry: Optional[datetime],
    last_update: Optional[datetime],
    adsense_status: Optional[str],
    now: datetime,
) -> HealthReport:
    """Classify a project and list the reasons behind a non-good status.

    A project that was never updated counts as stale.
    """
    days_until_expiry = _days_between(now, domain_expiry) if domain_expiry else None
    days_since_update = _days_between(last_update, now) if last_update else None

    reasons = []
    if days_until_expiry is not None:
        if days_until_expiry < 0:
            reasons.append("Domain expired")
        elif days_until_expiry < DOMAIN_WARNING_DAYS:
            reasons.append(f"Domain expires in {days_until_expiry} days")
    if days_since_update is None:
        reasons.append("Never updated")
    elif days_since_update > STALE_WARNING_DAYS:
        reasons.append(f"No update for {days_since_update} days")
    if adsense_status == AdsenseStatus.BANNED.value:
        reasons.append("AdSense banned")
    elif adsense_status == AdsenseStatus.LIMITED.value:
        reasons.append("AdSense limited")

    stale_days = days_since_update if days_since_update is not None else STALE_DANGER_DAYS + 1

    if (
        (days_until_expiry is not None and days_until_expiry < DOMAIN_DANGER_DAYS)
        or adsense_status == AdsenseStatus.BANNED.value
        or stale_days > STALE_DANGER_DAYS
    ):
        return HealthReport("danger", reasons)

    if (
        (days_until_expiry is not None and days_until_expiry < DOMAIN_WARNING_DAYS)
        or stale_days > STALE_WARNING_DAYS
        or adsense_status == AdsenseStatus.LIMITED.value
    ):
        return HealthReport("warning", reasons)

    return HealthReport("good", reasons)
