"""Hiring pipeline statistics."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from core.security import Actor, require_staff
from database.models.candidates import Candidate, CandidateStatus
from database.models.employees import Employee
from database.models.interviews import Interview, InterviewResult
from database.store import EntityStore


@dataclass
class Share:
    key: str
    count: int
    percentage: int


@dataclass
class PipelineStatistics:
    total_candidates: int
    submitted_candidates: int
    interview_candidates: int
    hired_candidates: int
    total_interviews: int
    passed_interviews: int
    new_employees: int
    status_distribution: List[Share] = field(default_factory=list)
    interview_results: List[Share] = field(default_factory=list)


def _shares(counts: Dict[str, int], total: int) -> List[Share]:
    return [
        Share(key=key, count=count, percentage=(200 * count + total) // (2 * total))
        for key, count in sorted(counts.items())
        if total
    ]


def start_of_month(now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


async def get_statistics(
    store: EntityStore,
    actor: Optional[Actor],
    now: Optional[datetime] = None,
) -> PipelineStatistics:
    """Candidate and interview counts for the HR dashboard."""
    require_staff(actor, "view statistics")

    candidates = await store.select(Candidate)
    interviews = await store.select(Interview)
    new_employees = await store.count(Employee, created_at__gte=start_of_month(now))

    status_counts = Counter(c.status.value for c in candidates)
    result_counts = Counter(i.result.value for i in interviews)

    return PipelineStatistics(
        total_candidates=len(candidates),
        submitted_candidates=status_counts.get(CandidateStatus.SUBMITTED.value, 0),
        interview_candidates=status_counts.get(CandidateStatus.INTERVIEW.value, 0),
        hired_candidates=status_counts.get(CandidateStatus.HIRED.value, 0),
        total_interviews=len(interviews),
        passed_interviews=result_counts.get(InterviewResult.PASS.value, 0),
        new_employees=new_employees,
        status_distribution=_shares(dict(status_counts), len(candidates)),
        interview_results=_shares(dict(result_counts), len(interviews)),
    )
