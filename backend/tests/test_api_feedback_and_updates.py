"""
DiaryPlus Backend — Feedback Board and Investor Updates (API)
===============================================================

What we test:
    ✅ Anonymous submissions, the per-IP submission limit (429 + Retry-After)
    ✅ Vote toggling: created → updated → removed, net counts, sorting
    ✅ One investor update per month, generated content when left empty
    ✅ Public pages only for published updates
"""

import pytest

FEEDBACK = {
    "feedback_type": "feature_request",
    "title": "Dark mode",
    "description": "Please add a dark theme for late nights.",
}


async def submit(client, headers=None, **overrides):
    response = await client.post("/api/feedback", json={**FEEDBACK, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestFeedbackSubmission:

    @pytest.mark.asyncio
    async def test_anonymous_submission(self, client):
        item = await submit(client)
        assert item["status"] == "submitted"
        assert item["priority"] == "medium"
        assert item["tracking_id"].startswith("FB-")
        assert item["votes_count"] == 0

    @pytest.mark.asyncio
    async def test_short_description_rejected(self, client):
        response = await client.post("/api/feedback", json={**FEEDBACK, "description": "too short"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_submission_rate_limit(self, client):
        for _ in range(5):
            await submit(client)

        response = await client.post("/api/feedback", json=FEEDBACK)
        assert response.status_code == 429
        assert response.json()["error"] == "rate_limit_exceeded"
        assert int(response.headers["Retry-After"]) > 0

        # Reading the board is not limited
        listed = await client.get("/api/feedback")
        assert listed.status_code == 200

    @pytest.mark.asyncio
    async def test_filter_by_type(self, client):
        await submit(client, feedback_type="bug", title="Crash on save")
        await submit(client)

        response = await client.get("/api/feedback", params={"type": "bug"})
        assert [f["title"] for f in response.json()["feedback"]] == ["Crash on save"]


class TestFeedbackVotes:

    @pytest.mark.asyncio
    async def test_vote_toggle_cycle(self, client, signup):
        headers, _ = await signup()
        item = await submit(client)
        url = f"/api/feedback/{item['id']}/vote"

        created = await client.post(url, json={"vote_type": "up"}, headers=headers)
        assert created.json() == {"action": "created", "votes_count": 1}

        updated = await client.post(url, json={"vote_type": "down"}, headers=headers)
        assert updated.json() == {"action": "updated", "votes_count": -1}

        removed = await client.post(url, json={"vote_type": "down"}, headers=headers)
        assert removed.json() == {"action": "removed", "votes_count": 0}

    @pytest.mark.asyncio
    async def test_voting_requires_account(self, client):
        item = await submit(client)
        client.cookies.clear()
        response = await client.post(f"/api/feedback/{item['id']}/vote", json={"vote_type": "up"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_most_voted_sort_and_own_vote(self, client, signup):
        ada, _ = await signup("ada@example.com")
        bob, _ = await signup("bob@example.com")
        quiet = await submit(client, title="Quiet idea")
        popular = await submit(client, title="Popular idea")

        for headers in (ada, bob):
            await client.post(f"/api/feedback/{popular['id']}/vote", json={"vote_type": "up"}, headers=headers)
        await client.post(f"/api/feedback/{quiet['id']}/vote", json={"vote_type": "down"}, headers=bob)

        response = await client.get("/api/feedback", params={"sort": "most_voted"}, headers=ada)
        board = response.json()["feedback"]
        assert [f["title"] for f in board] == ["Popular idea", "Quiet idea"]
        assert board[0]["votes_count"] == 2
        assert board[0]["user_vote"] == "up"
        assert board[1]["votes_count"] == -1
        assert board[1]["user_vote"] is None

    @pytest.mark.asyncio
    async def test_vote_on_unknown_feedback(self, client, signup):
        headers, _ = await signup()
        response = await client.post(
            "/api/feedback/00000000-0000-0000-0000-000000000000/vote",
            json={"vote_type": "up"},
            headers=headers,
        )
        assert response.status_code == 404


class TestInvestorUpdates:

    @pytest.mark.asyncio
    async def test_generated_when_content_empty(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        await client.post(
            "/api/logs",
            json={"projectId": project["id"], "date": "2024-06-12", "title": "Closed pilot customer"},
            headers=headers,
        )

        response = await client.post(
            "/api/investor-updates",
            json={"projectId": project["id"], "month": 6, "year": 2024},
            headers=headers,
        )
        assert response.status_code == 201
        update = response.json()
        assert update["content_md"].startswith("# Monthly Update - June 2024")
        assert "Closed pilot customer" in update["content_md"]
        assert update["ai_summary"] == "Auto-generated from daily logs and goals"
        assert update["is_public"] is False
        assert update["public_slug"].startswith("2024-06-")

    @pytest.mark.asyncio
    async def test_one_update_per_month(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        body = {"projectId": project["id"], "month": 5, "year": 2024, "content_md": "May went well."}

        first = await client.post("/api/investor-updates", json=body, headers=headers)
        assert first.status_code == 201
        assert first.json()["ai_summary"] is None

        second = await client.post("/api/investor-updates", json=body, headers=headers)
        assert second.status_code == 400
        assert second.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_public_page_only_when_published(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        update = (
            await client.post(
                "/api/investor-updates",
                json={"projectId": project["id"], "month": 4, "year": 2024, "content_md": "April recap"},
                headers=headers,
            )
        ).json()
        public_url = f"/api/public/updates/{update['public_slug']}"
        client.cookies.clear()

        hidden = await client.get(public_url)
        assert hidden.status_code == 404

        published = await client.patch(
            f"/api/investor-updates/{update['id']}", json={"is_public": True}, headers=headers
        )
        assert published.json()["is_public"] is True

        client.cookies.clear()
        page = await client.get(public_url)
        assert page.status_code == 200
        body = page.json()
        assert body["content_md"] == "April recap"
        assert body["project"] == {"name": project["name"], "slug": project["slug"]}
        assert "user_id" not in body
        assert "public" in page.headers["Cache-Control"]

    @pytest.mark.asyncio
    async def test_month_out_of_range(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        response = await client.post(
            "/api/investor-updates",
            json={"projectId": project["id"], "month": 13, "year": 2024},
            headers=headers,
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_newest_month_first(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        for month in (1, 3, 2):
            await client.post(
                "/api/investor-updates",
                json={"projectId": project["id"], "month": month, "year": 2024, "content_md": f"Month {month}"},
                headers=headers,
            )
        response = await client.get("/api/investor-updates", params={"projectId": project["id"]}, headers=headers)
        assert [u["month"] for u in response.json()["updates"]] == [3, 2, 1]
