"""
DiaryPlus Backend — Accounts, Projects and Invitations (API)
==============================================================

What:  End-to-end tests through the FastAPI app: signup/signin, the
       current-user endpoints, project CRUD with role checks and the
       invitation flow.
How:   httpx AsyncClient + ASGITransport; database is in-memory SQLite.
"""

import datetime as dt
import uuid

import pytest
from sqlalchemy import update

from diaryplus.database import utcnow
from diaryplus.models.project import ProjectInvitation


class TestAuth:

    @pytest.mark.asyncio
    async def test_signup_returns_token_and_cookie(self, client):
        response = await client.post(
            "/api/auth/signup",
            json={"email": "  Ada@Example.com ", "password": "secret123", "name": "Ada"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["user"]["email"] == "ada@example.com"
        assert body["user"]["onboarding_completed"] is False
        assert body["token_type"] == "bearer"
        assert "password" not in str(body["user"])
        assert "auth-token=" in response.headers["set-cookie"]
        assert "httponly" in response.headers["set-cookie"].lower()

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, client, signup):
        await signup("ada@example.com")
        response = await client.post(
            "/api/auth/signup", json={"email": "ADA@example.com", "password": "another1"}
        )
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_short_password_rejected_by_schema(self, client):
        response = await client.post(
            "/api/auth/signup", json={"email": "ada@example.com", "password": "123"}
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_signin(self, client, signup):
        await signup("ada@example.com", password="secret123")

        ok = await client.post(
            "/api/auth/signin", json={"email": "ada@example.com", "password": "secret123"}
        )
        assert ok.status_code == 200
        assert ok.json()["token"]

        bad = await client.post(
            "/api/auth/signin", json={"email": "ada@example.com", "password": "wrong-one"}
        )
        assert bad.status_code == 401
        assert bad.json()["error"] == "unauthorized"

        unknown = await client.post(
            "/api/auth/signin", json={"email": "nobody@example.com", "password": "secret123"}
        )
        assert unknown.status_code == 401
        assert unknown.json()["message"] == bad.json()["message"]

    @pytest.mark.asyncio
    async def test_me_requires_token(self, client):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "unauthorized"
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_me_rejects_garbage_token(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_with_bearer_token(self, client, signup):
        headers, user = await signup("ada@example.com")
        client.cookies.clear()
        response = await client.get("/api/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["id"] == user["id"]

    @pytest.mark.asyncio
    async def test_signout_clears_cookie(self, client):
        response = await client.post("/api/auth/signout")
        assert response.status_code == 200
        assert "auth-token=" in response.headers["set-cookie"]


class TestOnboarding:

    @pytest.mark.asyncio
    async def test_ensure_personal_is_idempotent(self, client, signup):
        headers, _ = await signup()
        first = await client.post("/api/user/ensure-personal", headers=headers)
        second = await client.post("/api/user/ensure-personal", headers=headers)

        assert first.status_code == 200
        assert first.json()["is_personal"] is True
        assert first.json()["name"] == "Personal"
        assert second.json()["id"] == first.json()["id"]

    @pytest.mark.asyncio
    async def test_onboarding_complete_sets_default_project(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)

        response = await client.post(
            "/api/user/onboarding-complete", json={"projectId": project["id"]}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["onboarding_completed"] is True
        assert response.json()["default_project_id"] == project["id"]

    @pytest.mark.asyncio
    async def test_onboarding_complete_rejects_foreign_project(self, client, signup, project_for):
        owner_headers, _ = await signup("owner@example.com")
        project = await project_for(owner_headers)
        headers, _ = await signup("other@example.com")

        response = await client.post(
            "/api/user/onboarding-complete", json={"projectId": project["id"]}, headers=headers
        )
        assert response.status_code == 403


class TestProjects:

    @pytest.mark.asyncio
    async def test_create_and_list(self, client, signup, project_for):
        headers, _ = await signup()
        first = await project_for(headers, "Acme Rockets")
        second = await project_for(headers, "Acme Rockets")

        assert first["slug"] == "acme-rockets"
        assert second["slug"] == "acme-rockets-2"
        assert first["role"] == "owner"

        listed = await client.get("/api/projects", headers=headers)
        assert listed.status_code == 200
        assert {p["id"] for p in listed.json()["projects"]} == {first["id"], second["id"]}

    @pytest.mark.asyncio
    async def test_non_member_is_forbidden(self, client, signup, project_for):
        owner_headers, _ = await signup("owner@example.com")
        project = await project_for(owner_headers)
        outsider, _ = await signup("outsider@example.com")

        response = await client.get(f"/api/projects/{project['id']}", headers=outsider)
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

        listed = await client.get("/api/logs", params={"projectId": project["id"]}, headers=outsider)
        assert listed.status_code == 403

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)

        updated = await client.patch(
            f"/api/projects/{project['id']}", json={"description": "Reusable rockets"}, headers=headers
        )
        assert updated.status_code == 200
        assert updated.json()["description"] == "Reusable rockets"
        assert updated.json()["slug"] == project["slug"]

        deleted = await client.delete(f"/api/projects/{project['id']}", headers=headers)
        assert deleted.status_code == 200
        assert deleted.json()["message"] == "Project deleted"

        missing = await client.get(f"/api/projects/{project['id']}", headers=headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_list_endpoints_require_project_id(self, client, signup):
        headers, _ = await signup()
        response = await client.get("/api/logs", headers=headers)
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert response.json()["details"]["field"] == "projectId"


class TestInvitations:

    @pytest.mark.asyncio
    async def test_invite_accept_and_member_role(self, client, signup, project_for):
        owner, _ = await signup("owner@example.com")
        project = await project_for(owner)
        member, _ = await signup("bob@example.com")

        invite = await client.post(
            f"/api/projects/{project['id']}/invitations",
            json={"email": "Bob@Example.com", "role": "member"},
            headers=owner,
        )
        assert invite.status_code == 201
        token = invite.json()["token"]
        assert invite.json()["status"] == "pending"

        accepted = await client.post(f"/api/invitations/{token}/accept", headers=member)
        assert accepted.status_code == 200
        assert accepted.json()["role"] == "member"

        visible = await client.get(f"/api/projects/{project['id']}", headers=member)
        assert visible.status_code == 200

        # Members can read but not manage
        rename = await client.patch(
            f"/api/projects/{project['id']}", json={"name": "Hijacked"}, headers=member
        )
        assert rename.status_code == 403
        invitations = await client.get(f"/api/projects/{project['id']}/invitations", headers=member)
        assert invitations.status_code == 403

        again = await client.post(f"/api/invitations/{token}/accept", headers=member)
        assert again.status_code == 400

    @pytest.mark.asyncio
    async def test_invitation_bound_to_email(self, client, signup, project_for):
        owner, _ = await signup("owner@example.com")
        project = await project_for(owner)
        invite = await client.post(
            f"/api/projects/{project['id']}/invitations",
            json={"email": "bob@example.com"},
            headers=owner,
        )
        carol, _ = await signup("carol@example.com")

        response = await client.post(f"/api/invitations/{invite.json()['token']}/accept", headers=carol)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_revoked_invitation_cannot_be_used(self, client, signup, project_for):
        owner, _ = await signup("owner@example.com")
        project = await project_for(owner)
        invite = (
            await client.post(
                f"/api/projects/{project['id']}/invitations",
                json={"email": "bob@example.com"},
                headers=owner,
            )
        ).json()

        revoked = await client.delete(
            f"/api/projects/{project['id']}/invitations/{invite['id']}", headers=owner
        )
        assert revoked.status_code == 200

        bob, _ = await signup("bob@example.com")
        response = await client.post(f"/api/invitations/{invite['token']}/accept", headers=bob)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_token(self, client, signup):
        headers, _ = await signup()
        response = await client.post("/api/invitations/does-not-exist/accept", headers=headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_expired_invitation_is_rejected(self, client, signup, project_for, db_session):
        owner, _ = await signup("owner@example.com")
        project = await project_for(owner)
        invite = (
            await client.post(
                f"/api/projects/{project['id']}/invitations",
                json={"email": "bob@example.com"},
                headers=owner,
            )
        ).json()
        await db_session.execute(
            update(ProjectInvitation)
            .where(ProjectInvitation.id == uuid.UUID(invite["id"]))
            .values(expires_at=utcnow() - dt.timedelta(days=1))
        )
        await db_session.commit()

        bob, _ = await signup("bob@example.com")
        response = await client.post(f"/api/invitations/{invite['token']}/accept", headers=bob)
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "token"

        hidden = await client.get(f"/api/projects/{project['id']}", headers=bob)
        assert hidden.status_code == 403


class TestHealthAndMiddleware:

    @pytest.mark.asyncio
    async def test_health_degraded_without_ai(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["database"] == "connected"
        assert body["ai"] == "not_configured"
        assert body["status"] == "degraded"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, client):
        response = await client.get("/api/auth/me", headers={"X-Request-ID": "req-0001"})
        assert response.json()["request_id"] == "req-0001"
