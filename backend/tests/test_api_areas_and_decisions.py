"""
DiaryPlus Backend — Life Areas and Decision Records (API)
"""

import pytest


class TestLifeAreas:

    @pytest.mark.asyncio
    async def test_sorted_and_soft_deleted(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        pid = project["id"]
        for name, order in (("Health", 2), ("Work", 1), ("Family", 2)):
            created = await client.post(
                "/api/life-areas", json={"projectId": pid, "name": name, "sort_order": order}, headers=headers
            )
            assert created.status_code == 201

        listed = await client.get("/api/life-areas", params={"projectId": pid}, headers=headers)
        areas = listed.json()["areas"]
        assert [a["name"] for a in areas] == ["Work", "Family", "Health"]

        work = areas[0]
        deleted = await client.delete(f"/api/life-areas/{work['id']}", headers=headers)
        assert deleted.status_code == 200

        listed = await client.get("/api/life-areas", params={"projectId": pid}, headers=headers)
        assert [a["name"] for a in listed.json()["areas"]] == ["Family", "Health"]

    @pytest.mark.asyncio
    async def test_rename(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        area = (
            await client.post("/api/life-areas", json={"projectId": project["id"], "name": "Fitness"}, headers=headers)
        ).json()
        assert area["color"] == "#6366F1"

        renamed = await client.patch(
            f"/api/life-areas/{area['id']}", json={"name": "Health", "color": "#FF0000"}, headers=headers
        )
        assert renamed.json()["name"] == "Health"
        assert renamed.json()["color"] == "#FF0000"


class TestDecisions:

    @pytest.mark.asyncio
    async def test_record_and_supersede(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        pid = project["id"]

        first = (
            await client.post(
                "/api/decisions",
                json={"projectId": pid, "title": "Use Postgres", "decision_md": "Go with managed Postgres"},
                headers=headers,
            )
        ).json()
        assert first["status"] == "proposed"
        assert first["relates_to"] == []

        second = (
            await client.post(
                "/api/decisions",
                json={"projectId": pid, "title": "Add read replica", "relates_to": [first["id"]], "status": "accepted"},
                headers=headers,
            )
        ).json()
        assert second["relates_to"] == [first["id"]]

        superseded = await client.patch(
            f"/api/decisions/{first['id']}", json={"status": "superseded"}, headers=headers
        )
        assert superseded.json()["status"] == "superseded"
        assert superseded.json()["decision_md"] == "Go with managed Postgres"

        accepted = await client.get(
            "/api/decisions", params={"projectId": pid, "status": "accepted"}, headers=headers
        )
        assert [d["title"] for d in accepted.json()["decisions"]] == ["Add read replica"]

    @pytest.mark.asyncio
    async def test_unknown_status(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        response = await client.post(
            "/api/decisions",
            json={"projectId": project["id"], "title": "x", "status": "maybe"},
            headers=headers,
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        decision = (
            await client.post("/api/decisions", json={"projectId": project["id"], "title": "Temp"}, headers=headers)
        ).json()

        assert (await client.delete(f"/api/decisions/{decision['id']}", headers=headers)).status_code == 200
        assert (await client.get(f"/api/decisions/{decision['id']}", headers=headers)).status_code == 404
