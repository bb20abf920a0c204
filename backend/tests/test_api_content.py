"""
DiaryPlus Backend — Memories, Time Capsules, People, Flashcards, Yearbooks
and Markdown Export (API)
============================================================================

What we test:
    ✅ Private memories are hidden from other members, shared ones are not
    ✅ Time capsules: future dates only, scheduler secret, delivery run
    ✅ People: derived contact/birthday fields, search
    ✅ Flashcard review rescheduling and deck stats
    ✅ Yearbook generate → list → download → delete, owner-only downloads
    ✅ Markdown export zip layout
"""

import datetime as dt
import io
import uuid
import zipfile

import pytest
from sqlalchemy import select

from diaryplus.database import utcnow
from diaryplus.models.cron_run import CronRun
from diaryplus.models.memory import TimeCapsule
from diaryplus.services.memory_service import MemoryService

CRON_HEADERS = {"Authorization": "Bearer test-cron-secret"}


# ══════════════════════════════════════════════════════════════════════════
# Memories and time capsules
# ══════════════════════════════════════════════════════════════════════════

class TestMemories:

    @pytest.mark.asyncio
    async def test_private_and_shared_visibility(self, client, team):
        project, owner, member = await team()
        private = (
            await client.post(
                "/api/memories",
                json={"projectId": project["id"], "title": "First office", "memory_date": "2023-09-01"},
                headers=owner,
            )
        ).json()
        shared = (
            await client.post(
                "/api/memories",
                json={
                    "projectId": project["id"],
                    "title": "Team offsite",
                    "memory_date": "2024-04-12",
                    "is_private": False,
                    "tags": ["team"],
                },
                headers=owner,
            )
        ).json()

        listed = await client.get("/api/memories", params={"projectId": project["id"]}, headers=member)
        assert [m["id"] for m in listed.json()["memories"]] == [shared["id"]]

        hidden = await client.get(f"/api/memories/{private['id']}", headers=member)
        assert hidden.status_code == 404
        visible = await client.get(f"/api/memories/{shared['id']}", headers=member)
        assert visible.status_code == 200

        # Shared does not mean editable
        edit = await client.patch(f"/api/memories/{shared['id']}", json={"title": "Mine"}, headers=member)
        assert edit.status_code == 404

    @pytest.mark.asyncio
    async def test_filter_by_tag_and_favorite(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        for title, tags, favorite in (("Demo day", ["launch"], True), ("Beach", ["holiday"], False)):
            await client.post(
                "/api/memories",
                json={
                    "projectId": project["id"],
                    "title": title,
                    "memory_date": "2024-05-01",
                    "tags": tags,
                    "is_favorite": favorite,
                },
                headers=headers,
            )

        by_tag = await client.get(
            "/api/memories", params={"projectId": project["id"], "tag": "holiday"}, headers=headers
        )
        assert [m["title"] for m in by_tag.json()["memories"]] == ["Beach"]

        favorites = await client.get(
            "/api/memories", params={"projectId": project["id"], "favorite": "true"}, headers=headers
        )
        assert [m["title"] for m in favorites.json()["memories"]] == ["Demo day"]

    @pytest.mark.asyncio
    async def test_latitude_range(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        response = await client.post(
            "/api/memories",
            json={"projectId": project["id"], "title": "x", "memory_date": "2024-05-01", "latitude": 123},
            headers=headers,
        )
        assert response.status_code == 422


class TestTimeCapsules:

    @pytest.mark.asyncio
    async def test_schedule_in_future(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        tomorrow = (utcnow().date() + dt.timedelta(days=1)).isoformat()

        created = await client.post(
            "/api/memories/time-capsules",
            json={
                "projectId": project["id"],
                "title": "Letter to future me",
                "content_md": "Did we ship?",
                "deliver_on": tomorrow,
                "target_email": "Founder@Example.com",
            },
            headers=headers,
        )
        assert created.status_code == 201
        assert created.json()["sent"] is False
        assert created.json()["target_email"] == "founder@example.com"

        listed = await client.get(
            "/api/memories/time-capsules", params={"projectId": project["id"]}, headers=headers
        )
        assert len(listed.json()["capsules"]) == 1

    @pytest.mark.asyncio
    async def test_today_is_rejected(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        response = await client.post(
            "/api/memories/time-capsules",
            json={
                "projectId": project["id"],
                "title": "Too soon",
                "content_md": "...",
                "deliver_on": utcnow().date().isoformat(),
                "target_email": "founder@example.com",
            },
            headers=headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_cron_requires_secret(self, client):
        missing = await client.get("/api/cron/time-capsules")
        assert missing.status_code == 401

        wrong = await client.get("/api/cron/time-capsules", headers={"Authorization": "Bearer nope"})
        assert wrong.status_code == 401

        ok = await client.get("/api/cron/time-capsules", headers=CRON_HEADERS)
        assert ok.status_code == 200
        assert ok.json() == {"processed": 0, "delivered": 0, "results": []}

    @pytest.mark.asyncio
    async def test_cron_rejects_non_ascii_secret(self, client):
        response = await client.get(
            "/api/cron/time-capsules",
            headers={"Authorization": "Bearer café".encode("latin-1")},
        )
        assert response.status_code == 401


def make_capsule(deliver_on, title="Capsule"):
    return TimeCapsule(
        project_id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        title=title,
        content_md="Hello from the past",
        deliver_on=deliver_on,
        target_email="founder@example.com",
        sent=False,
    )


class TestCapsuleDelivery:

    @pytest.mark.asyncio
    async def test_due_capsules_delivered_once(self, db_session):
        today = utcnow().date()
        due = make_capsule(today - dt.timedelta(days=1), "Due")
        future = make_capsule(today + dt.timedelta(days=30), "Later")
        db_session.add_all([due, future])
        await db_session.flush()

        service = MemoryService()
        report = await service.deliver_due_capsules(db_session)
        assert report.processed == 1
        assert report.delivered == 1
        assert report.results[0].title == "Due"
        assert due.sent is True
        assert due.sent_at is not None
        assert future.sent is False

        again = await service.deliver_due_capsules(db_session)
        assert again.processed == 0

        runs = (await db_session.execute(select(CronRun))).scalars().all()
        assert [(r.processed, r.succeeded) for r in runs] == [(1, 1), (0, 0)]

    @pytest.mark.asyncio
    async def test_failed_delivery_is_retried_later(self, db_session):
        class BrokenNotifier:
            async def deliver(self, capsule):
                raise ConnectionError("smtp down")

        capsule = make_capsule(utcnow().date())
        db_session.add(capsule)
        await db_session.flush()

        report = await MemoryService(notifier=BrokenNotifier()).deliver_due_capsules(db_session)
        assert report.processed == 1
        assert report.delivered == 0
        assert report.results[0].status == "failed"
        assert capsule.sent is False


# ══════════════════════════════════════════════════════════════════════════
# People
# ══════════════════════════════════════════════════════════════════════════

class TestPeople:

    @pytest.mark.asyncio
    async def test_interactions_update_last_contact(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        person = (
            await client.post(
                "/api/people",
                json={"projectId": project["id"], "name": "Grace Hopper", "email": "grace@navy.mil"},
                headers=headers,
            )
        ).json()
        assert person["last_contact"] is None
        assert person["importance"] == 3

        three_days_ago = utcnow().date() - dt.timedelta(days=3)
        added = await client.post(
            f"/api/people/{person['id']}/interactions",
            json={"date": three_days_ago.isoformat(), "type": "call", "sentiment": 5},
            headers=headers,
        )
        assert added.status_code == 201

        fetched = (await client.get(f"/api/people/{person['id']}", headers=headers)).json()
        assert fetched["last_contact"] == three_days_ago.isoformat()
        assert fetched["days_since_last_contact"] == 3

        history = await client.get(f"/api/people/{person['id']}/interactions", headers=headers)
        assert [i["type"] for i in history.json()["interactions"]] == ["call"]

    @pytest.mark.asyncio
    async def test_search(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        for name, aka in (("Ada Lovelace", "Countess"), ("Alan Turing", None)):
            await client.post(
                "/api/people", json={"projectId": project["id"], "name": name, "aka": aka}, headers=headers
            )

        response = await client.get(
            "/api/people", params={"projectId": project["id"], "search": "countess"}, headers=headers
        )
        assert [p["name"] for p in response.json()["people"]] == ["Ada Lovelace"]

    @pytest.mark.asyncio
    async def test_upcoming_birthdays(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        today = utcnow().date()
        soon = today + dt.timedelta(days=5)
        born = soon.replace(year=soon.year - 30) if not (soon.month == 2 and soon.day == 29) else dt.date(1992, 2, 29)

        await client.post(
            "/api/people",
            json={"projectId": project["id"], "name": "Birthday Soon", "birthday": born.isoformat()},
            headers=headers,
        )
        await client.post("/api/people", json={"projectId": project["id"], "name": "No Birthday"}, headers=headers)

        response = await client.get(
            "/api/people/birthdays", params={"projectId": project["id"], "days": 10}, headers=headers
        )
        [upcoming] = response.json()["birthdays"]
        assert upcoming["name"] == "Birthday Soon"
        assert upcoming["days_until_birthday"] == 5


# ══════════════════════════════════════════════════════════════════════════
# Flashcards
# ══════════════════════════════════════════════════════════════════════════

class TestFlashcards:

    @pytest.mark.asyncio
    async def test_review_reschedules_card(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        card = (
            await client.post(
                "/api/flashcards",
                json={"projectId": project["id"], "front": "CAC", "back": "Customer acquisition cost"},
                headers=headers,
            )
        ).json()
        assert card["deck_name"] == "General"
        assert card["repetitions"] == 0

        reviewed = await client.post(f"/api/flashcards/{card['id']}/review", json={"rating": 5}, headers=headers)
        assert reviewed.status_code == 200
        body = reviewed.json()
        assert body["repetitions"] == 1
        assert body["interval"] == 1
        assert body["ease_factor"] == pytest.approx(2.6)
        assert body["next_review"] is not None

        listed = await client.get("/api/flashcards", params={"projectId": project["id"]}, headers=headers)
        stats = listed.json()["stats"]
        assert stats["total"] == 1
        assert stats["new"] == 0
        assert stats["due"] == 0

    @pytest.mark.asyncio
    async def test_rating_out_of_range(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        card = (
            await client.post(
                "/api/flashcards", json={"projectId": project["id"], "front": "a", "back": "b"}, headers=headers
            )
        ).json()
        response = await client.post(f"/api/flashcards/{card['id']}/review", json={"rating": 6}, headers=headers)
        assert response.status_code == 422


# ══════════════════════════════════════════════════════════════════════════
# Yearbook and export
# ══════════════════════════════════════════════════════════════════════════

async def write_entries(client, headers, project_id, days):
    for day in days:
        response = await client.post(
            "/api/personal/entries",
            json={"projectId": project_id, "content": f"Entry for {day}", "entry_date": day, "mood": 4},
            headers=headers,
        )
        assert response.status_code == 201


class TestYearbook:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fmt,magic", [("pdf", b"%PDF"), ("epub", b"PK")])
    async def test_generate_and_download(self, client, signup, project_for, fmt, magic):
        headers, _ = await signup()
        project = await project_for(headers)
        await write_entries(client, headers, project["id"], ["2024-01-10", "2024-02-14", "2025-01-01"])

        generated = await client.post(
            "/api/yearbook/generate",
            json={"projectId": project["id"], "format": fmt, "startDate": "2024-01-01", "endDate": "2024-12-31"},
            headers=headers,
        )
        assert generated.status_code == 201
        result = generated.json()
        assert result["entry_count"] == 2
        assert result["title"] == "My 2024 Journal"
        assert result["download_url"].startswith("/api/yearbook/download/")

        download = await client.get(result["download_url"], headers=headers)
        assert download.status_code == 200
        assert download.content.startswith(magic)
        assert "attachment" in download.headers["Content-Disposition"]

        listed = await client.get("/api/yearbook", params={"projectId": project["id"]}, headers=headers)
        [generation] = listed.json()["generations"]
        assert generation["download_count"] == 1
        assert generation["file_size"] == len(download.content)

    @pytest.mark.asyncio
    async def test_no_entries_in_range(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        response = await client.post(
            "/api/yearbook/generate",
            json={"projectId": project["id"], "startDate": "2020-01-01", "endDate": "2020-12-31"},
            headers=headers,
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_download_is_owner_only(self, client, signup, project_for):
        headers, _ = await signup("owner@example.com")
        project = await project_for(headers)
        await write_entries(client, headers, project["id"], ["2024-03-03"])
        result = (
            await client.post(
                "/api/yearbook/generate",
                json={"projectId": project["id"], "startDate": "2024-01-01", "endDate": "2024-12-31"},
                headers=headers,
            )
        ).json()

        stranger, _ = await signup("stranger@example.com")
        response = await client.get(result["download_url"], headers=stranger)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_removes_file(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        await write_entries(client, headers, project["id"], ["2024-03-03"])
        result = (
            await client.post(
                "/api/yearbook/generate",
                json={"projectId": project["id"], "startDate": "2024-01-01", "endDate": "2024-12-31"},
                headers=headers,
            )
        ).json()

        deleted = await client.delete(f"/api/yearbook/{result['id']}", headers=headers)
        assert deleted.status_code == 200
        gone = await client.get(result["download_url"], headers=headers)
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_inverted_range(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        response = await client.post(
            "/api/yearbook/generate",
            json={"projectId": project["id"], "startDate": "2024-12-31", "endDate": "2024-01-01"},
            headers=headers,
        )
        assert response.status_code == 422


class TestMarkdownExport:

    @pytest.mark.asyncio
    async def test_zip_layout(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        pid = project["id"]
        for title in ("Standup", "Standup"):
            await client.post(
                "/api/logs", json={"projectId": pid, "date": "2024-06-03", "title": title}, headers=headers
            )
        await client.post(
            "/api/goals",
            json={"projectId": pid, "objective": "Reach $10k MRR", "key_results": [{"name": "MRR", "target": 10000}]},
            headers=headers,
        )
        await client.post(
            "/api/investor-updates",
            json={"projectId": pid, "month": 6, "year": 2024, "content_md": "June recap"},
            headers=headers,
        )

        response = await client.get("/api/export/markdown", params={"projectId": pid}, headers=headers)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert f'filename="{project["slug"]}-export.zip"' in response.headers["Content-Disposition"]

        archive = zipfile.ZipFile(io.BytesIO(response.content))
        names = set(archive.namelist())
        assert names == {
            "README.md",
            "daily-logs/2024-06-03-standup.md",
            "daily-logs/2024-06-03-standup-2.md",
            "goals-okrs/reach-10k-mrr.md",
            "investor-updates/2024-06-investor-update.md",
        }
        assert response.headers["X-File-Count"] == "5"
        assert "| MRR | 0 | 10000 |" in archive.read("goals-okrs/reach-10k-mrr.md").decode()

    @pytest.mark.asyncio
    async def test_requires_membership(self, client, signup, project_for):
        owner, _ = await signup("owner@example.com")
        project = await project_for(owner)
        outsider, _ = await signup("outsider@example.com")
        response = await client.get("/api/export/markdown", params={"projectId": project["id"]}, headers=outsider)
        assert response.status_code == 403
