"""Tests for pipeline statistics."""

from datetime import datetime, timezone

import pytest

from api.services.statistics import get_statistics, start_of_month
from core.exceptions import Unauthorized
from database.models.candidates import CandidateStatus
from database.models.employees import Employee
from database.models.interviews import Interview, InterviewResult, InterviewSession


def test_start_of_month():
    now = datetime(2026, 3, 17, 15, 42, 7, 123, tzinfo=timezone.utc)
    assert start_of_month(now) == datetime(2026, 3, 1, tzinfo=timezone.utc)


class TestStatistics:
    @pytest.mark.asyncio
    async def test_empty_pipeline(self, store, hr):
        stats = await get_statistics(store, hr)

        assert stats.total_candidates == 0
        assert stats.status_distribution == []
        assert stats.interview_results == []

    @pytest.mark.asyncio
    async def test_counts_and_shares(self, store, hr, make_candidate, interviewers):
        await make_candidate(CandidateStatus.SUBMITTED)
        await make_candidate(CandidateStatus.HIRED)
        interviewing = await make_candidate(CandidateStatus.INTERVIEW)

        session = await store.insert(
            InterviewSession,
            {"candidate_id": interviewing.id, "title": "Technical round", "created_by": hr.id},
        )
        for interviewer, result in zip(interviewers, ["PASS", "FAIL", "PASS"]):
            await store.insert(
                Interview,
                {
                    "candidate_id": interviewing.id,
                    "interviewer_id": interviewer.id,
                    "interview_session_id": session.id,
                    "result": InterviewResult(result),
                },
            )
        await store.insert(
            Employee,
            {
                "user_id": interviewers[0].id,
                "place_of_residence": "12 Le Loi",
                "hometown": "Hue City",
                "national_id": "079203001234",
            },
        )

        stats = await get_statistics(store, hr)

        assert stats.total_candidates == 3
        assert stats.submitted_candidates == 1
        assert stats.interview_candidates == 1
        assert stats.hired_candidates == 1
        assert stats.total_interviews == 3
        assert stats.passed_interviews == 2
        assert stats.new_employees == 1
        assert {s.key: s.percentage for s in stats.status_distribution} == {
            "HIRED": 33,
            "INTERVIEW": 33,
            "SUBMITTED": 33,
        }
        assert {s.key: (s.count, s.percentage) for s in stats.interview_results} == {
            "FAIL": (1, 33),
            "PASS": (2, 67),
        }

    @pytest.mark.asyncio
    async def test_requires_staff(self, store, employee):
        with pytest.raises(Unauthorized):
            await get_statistics(store, employee)
