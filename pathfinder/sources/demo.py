"""Sample postings for development and for dashboards with no API keys."""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

from pathfinder.log import get_logger
from pathfinder.models import Posting
from pathfinder.sources.base import PostingSource

log = get_logger(__name__)


def _days_ago(days: int, now: datetime) -> str:
    return (now - timedelta(days=days)).isoformat()


class DemoSource(PostingSource):
    name = "DEMO"

    def __init__(self, latency: float = 0.6) -> None:
        self.latency = latency

    async def fetch(self, query: str, location: str) -> list[Posting]:
        await asyncio.sleep(self.latency)
        now = datetime.now(timezone.utc)
        log.info("DemoSource generating sample postings")
        return [
            Posting(
                id="1",
                title="Senior People Analytics Consultant",
                company="BrightPath Consulting",
                location="Sydney (Hybrid)",
                url="https://example.com/jobs/1",
                posted_at=_days_ago(3, now),
                description=(
                    "Lead organisational psychology projects, design experiments, and partner "
                    "with clients on leadership and culture programs. Strong statistics + "
                    "R/Python preferred."
                ),
                source=self.name,
                tags=["people analytics", "leadership", "consulting", "statistics"],
                salary_min=170000,
                salary_max=210000,
                work_type="Full-time",
                seniority="Senior",
                hybrid=True,
            ),
            Posting(
                id="2",
                title="Director, Behavioural Insights (Health)",
                company="NSW Health",
                location="Sydney (Hybrid)",
                url="https://example.com/jobs/2",
                posted_at=_days_ago(9, now),
                description=(
                    "Direct a small team applying behavioural science to public health "
                    "programs. Evidence synthesis, RCTs, and complex stakeholder environments."
                ),
                source=self.name,
                tags=["behavioural", "public sector", "leadership", "research"],
                salary_min=200000,
                salary_max=240000,
                work_type="Fixed-term",
                seniority="Director",
                hybrid=True,
            ),
            Posting(
                id="3",
                title="Head of Organisational Development",
                company="Canva",
                location="Sydney (Hybrid)",
                url="https://example.com/jobs/3",
                posted_at=_days_ago(15, now),
                description=(
                    "Own OD strategy: succession, leadership pipelines, culture diagnostics. "
                    "Strong program evaluation and data storytelling."
                ),
                source=self.name,
                tags=["od", "leadership", "culture", "people analytics"],
                salary_min=230000,
                salary_max=300000,
                work_type="Full-time",
                seniority="Director",
                hybrid=True,
            ),
            Posting(
                id="4",
                title="Senior Lecturer in Organisational Psychology",
                company="University of Sydney",
                location="Camperdown NSW (Hybrid)",
                url="https://example.com/jobs/4",
                posted_at=_days_ago(5, now),
                description=(
                    "Teach and research in organisational psychology. PhD required. Grants, "
                    "supervision, and applied partnerships encouraged."
                ),
                source=self.name,
                tags=["university", "research", "psychology", "doctoral"],
                salary_min=160000,
                salary_max=190000,
                work_type="Full-time",
                seniority="Senior",
                hybrid=True,
            ),
        ]
