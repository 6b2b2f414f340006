"""
Tests for the HTTP API.

Tests:
- Public endpoints (open positions, application form)
- Role enforcement through bearer tokens
- Error envelope for workflow errors
- Schema validation of request bodies
"""

import httpx
import pytest
import pytest_asyncio

from api.main import create_app
from conftest import auth_headers
from database.models.candidates import Candidate, CandidateStatus

API = "/api/v1"
TECH_NOTES = "Solid grasp of async Python and SQL"
SOFT_NOTES = "Communicates clearly, asks good questions"


@pytest_asyncio.fixture
async def client(store, audit):
    app = create_app(store=store, audit=audit)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def _application(position_id, **overrides):
    return {
        "full_name": "Nguyen Van An",
        "email": "an@example.com",
        "phone": "0912345678",
        "applied_position_id": position_id,
        "cv_url": "https://files.example.com/cv/an.pdf",
        **overrides,
    }


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_ready(self, client):
        response = await client.get("/ready")
        assert response.status_code == 200


class TestPublicEndpoints:
    @pytest.mark.asyncio
    async def test_open_positions(self, client, position, closed_position):
        response = await client.get(f"{API}/positions/open")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [position.id]

    @pytest.mark.asyncio
    async def test_submit_application(self, client, audit, position):
        response = await client.post(f"{API}/candidates", json=_application(position.id))

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "SUBMITTED"
        assert body["version"] == 1
        assert audit.actions() == ["CANDIDATE_SUBMITTED"]

    @pytest.mark.asyncio
    async def test_duplicate_application(self, client, position):
        await client.post(f"{API}/candidates", json=_application(position.id))
        response = await client.post(
            f"{API}/candidates", json=_application(position.id, email="AN@example.com")
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_APPLICATION"

    @pytest.mark.asyncio
    async def test_closed_position(self, client, closed_position):
        response = await client.post(f"{API}/candidates", json=_application(closed_position.id))

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "POSITION_NOT_OPEN"

    @pytest.mark.asyncio
    async def test_malformed_email(self, client, position):
        response = await client.post(
            f"{API}/candidates", json=_application(position.id, email="not-an-email")
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_candidate_list_requires_login(self, client):
        response = await client.get(f"{API}/candidates")
        assert response.status_code == 401


class TestCandidateEndpoints:
    @pytest.mark.asyncio
    async def test_approve_candidate(self, client, hr_user, make_candidate):
        candidate = await make_candidate()

        response = await client.post(
            f"{API}/candidates/{candidate.id}/status",
            json={"status": "APPROVED"},
            headers=auth_headers(hr_user.id),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "APPROVED"
        assert response.json()["version"] == 2

    @pytest.mark.asyncio
    async def test_invalid_transition(self, client, hr_user, make_candidate):
        candidate = await make_candidate()

        response = await client.post(
            f"{API}/candidates/{candidate.id}/status",
            json={"status": "HIRED"},
            headers=auth_headers(hr_user.id),
        )

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "INVALID_TRANSITION"
        assert error["current"] == "SUBMITTED"
        assert error["requested"] == "HIRED"

    @pytest.mark.asyncio
    async def test_employee_cannot_change_status(self, client, interviewers, make_candidate):
        candidate = await make_candidate()

        response = await client.post(
            f"{API}/candidates/{candidate.id}/status",
            json={"status": "APPROVED"},
            headers=auth_headers(interviewers[0].id),
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_unknown_candidate(self, client, hr_user):
        response = await client.get(
            f"{API}/candidates/missing", headers=auth_headers(hr_user.id)
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_list_with_status_filter(self, client, hr_user, make_candidate):
        await make_candidate(CandidateStatus.SUBMITTED)
        approved = await make_candidate(CandidateStatus.APPROVED)

        response = await client.get(
            f"{API}/candidates", params={"status": "APPROVED"}, headers=auth_headers(hr_user.id)
        )

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [approved.id]


class TestInterviewEndpoints:
    @pytest.mark.asyncio
    async def test_full_round(self, client, store, hr_user, interviewers, make_candidate):
        candidate = await make_candidate(CandidateStatus.APPROVED)
        hr = auth_headers(hr_user.id)

        created = await client.post(
            f"{API}/interviews/sessions",
            json={
                "candidate_id": candidate.id,
                "title": "Technical round",
                "scheduled_date": "2026-11-02T09:00:00+07:00",
                "interviewer_ids": [u.id for u in interviewers],
            },
            headers=hr,
        )
        assert created.status_code == 201
        session = created.json()
        assert session["progress"] == {"total": 3, "completed": 0, "passed": 0, "percentage": 0}
        session_id = session["session"]["id"]

        interviewer = interviewers[0]
        mine = await client.get(f"{API}/interviews/mine", headers=auth_headers(interviewer.id))
        assert mine.status_code == 200
        interview_id = mine.json()[0]["id"]

        evaluated = await client.put(
            f"{API}/interviews/{interview_id}/evaluation",
            json={"tech_notes": TECH_NOTES, "soft_notes": SOFT_NOTES, "result": "PASS"},
            headers=auth_headers(interviewer.id),
        )
        assert evaluated.status_code == 200
        assert evaluated.json()["result"] == "PASS"

        progress = await client.get(f"{API}/interviews/sessions/{session_id}/progress", headers=hr)
        assert progress.json() == {"total": 3, "completed": 1, "passed": 1, "percentage": 33}

        completed = await client.post(f"{API}/interviews/sessions/{session_id}/complete", headers=hr)
        assert completed.json()["status"] == "COMPLETED"

        reloaded = await store.get(Candidate, candidate.id)
        assert reloaded.status == CandidateStatus.INTERVIEW

    @pytest.mark.asyncio
    async def test_progress_hidden_from_unassigned_employee(
        self, client, hr_user, interviewers, make_candidate
    ):
        candidate = await make_candidate(CandidateStatus.APPROVED)
        created = await client.post(
            f"{API}/interviews/sessions",
            json={
                "candidate_id": candidate.id,
                "title": "Technical round",
                "interviewer_ids": [interviewers[0].id],
            },
            headers=auth_headers(hr_user.id),
        )
        session_id = created.json()["session"]["id"]
        url = f"{API}/interviews/sessions/{session_id}/progress"

        response = await client.get(url, headers=auth_headers(interviewers[1].id))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

        response = await client.get(url, headers=auth_headers(interviewers[0].id))
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_no_interviewers(self, client, hr_user, make_candidate):
        candidate = await make_candidate(CandidateStatus.APPROVED)

        response = await client.post(
            f"{API}/interviews/sessions",
            json={"candidate_id": candidate.id, "title": "Technical round", "interviewer_ids": []},
            headers=auth_headers(hr_user.id),
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "NO_INTERVIEWER_SELECTED"

    @pytest.mark.asyncio
    async def test_short_notes(self, client, hr_user, interviewers, make_candidate):
        candidate = await make_candidate(CandidateStatus.APPROVED)
        created = await client.post(
            f"{API}/interviews/sessions",
            json={
                "candidate_id": candidate.id,
                "title": "Technical round",
                "interviewer_ids": [interviewers[0].id],
            },
            headers=auth_headers(hr_user.id),
        )
        interview_id = created.json()["interviews"][0]["id"]

        response = await client.put(
            f"{API}/interviews/{interview_id}/evaluation",
            json={"tech_notes": "meh", "soft_notes": SOFT_NOTES, "result": "FAIL"},
            headers=auth_headers(interviewers[0].id),
        )

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_FAILED"
        assert error["field"] == "tech_notes"


class TestDecisionEndpoints:
    @pytest.mark.asyncio
    async def test_hire_decision(self, client, hr_user, make_candidate):
        candidate = await make_candidate(CandidateStatus.INTERVIEW)

        response = await client.post(
            f"{API}/candidates/{candidate.id}/decisions",
            json={"decision": "HIRE", "notes": "Strong technical rounds, good team fit"},
            headers=auth_headers(hr_user.id),
        )
        assert response.status_code == 201
        assert response.json()["decision"] == "HIRE"

        details = await client.get(
            f"{API}/candidates/{candidate.id}", headers=auth_headers(hr_user.id)
        )
        body = details.json()
        assert body["candidate"]["status"] == "OFFERED"
        assert len(body["decisions"]) == 1

    @pytest.mark.asyncio
    async def test_decision_outside_interview(self, client, hr_user, make_candidate):
        candidate = await make_candidate(CandidateStatus.APPROVED)

        response = await client.post(
            f"{API}/candidates/{candidate.id}/decisions",
            json={"decision": "NO_HIRE", "notes": "Did not attend the interview"},
            headers=auth_headers(hr_user.id),
        )

        assert response.status_code == 409


class TestUserEndpoints:
    @pytest.mark.asyncio
    async def test_provision_account(self, client, admin_user):
        response = await client.post(
            f"{API}/users",
            json={"full_name": "Trần Thị Bình", "email": "binh@company.vn", "phone": "0901234567"},
            headers=auth_headers(admin_user.id),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["username"] == "tranthibinh"
        assert body["user"]["role"] == "EMPLOYEE"
        assert len(body["password"]) == 12
        assert "password_hash" not in body["user"]

    @pytest.mark.asyncio
    async def test_me(self, client, hr_user):
        response = await client.get(f"{API}/users/me", headers=auth_headers(hr_user.id))

        assert response.status_code == 200
        assert response.json()["username"] == hr_user.username

    @pytest.mark.asyncio
    async def test_disabled_account_is_locked_out(self, client, admin_user, interviewers):
        target = interviewers[0]
        disabled = await client.post(
            f"{API}/users/{target.id}/status",
            json={"status": "DISABLED"},
            headers=auth_headers(admin_user.id),
        )
        assert disabled.status_code == 200

        response = await client.get(f"{API}/users/me", headers=auth_headers(target.id))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "USER_INACTIVE"


class TestStatisticsEndpoints:
    @pytest.mark.asyncio
    async def test_statistics(self, client, hr_user, make_candidate):
        await make_candidate()

        response = await client.get(f"{API}/statistics", headers=auth_headers(hr_user.id))

        assert response.status_code == 200
        body = response.json()
        assert body["total_candidates"] == 1
        assert body["status_distribution"] == [{"key": "SUBMITTED", "count": 1, "percentage": 100}]

    @pytest.mark.asyncio
    async def test_audit_logs_admin_only(self, client, hr_user, admin_user):
        response = await client.get(f"{API}/audit-logs", headers=auth_headers(hr_user.id))
        assert response.status_code == 403

        response = await client.get(f"{API}/audit-logs", headers=auth_headers(admin_user.id))
        assert response.status_code == 200
