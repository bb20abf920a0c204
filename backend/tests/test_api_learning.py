"""
DiaryPlus Backend — Reading List, Highlights and Memory Collections (API)
===========================================================================

What we test:
    ✅ Learning items: create, status/kind filters, derived progress,
       author-only edits
    ✅ Highlights: itemId required, oldest first, counted on the item
    ✅ Flashcards from highlights: only the caller's highlights, optional
       id filter, cards due immediately
    ✅ Memory collections: public/own listing, membership rules, duplicates
"""

import pytest

LONG_PASSAGE = "the best founders write things down every single day so nothing important slips"


@pytest.fixture
def add_item(client):
    async def _add_item(headers, project, title="The Mom Test", **fields):
        body = {"projectId": project["id"], "kind": "book", "title": title, **fields}
        response = await client.post("/api/learning/items", json=body, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _add_item


@pytest.fixture
def add_highlight(client):
    async def _add_highlight(headers, item, text, note=None):
        body = {"item_id": item["id"], "text": text}
        if note is not None:
            body["note"] = note
        response = await client.post("/api/learning/highlights", json=body, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _add_highlight


# ══════════════════════════════════════════════════════════════════════════
# Reading list
# ══════════════════════════════════════════════════════════════════════════

class TestLearningItems:

    @pytest.mark.asyncio
    async def test_create_and_filter(self, client, signup, project_for, add_item):
        headers, _ = await signup()
        project = await project_for(headers)
        reading = await add_item(headers, project, "Zero to One", status="reading", author="Peter Thiel")
        await add_item(headers, project, "Acquired: Costco", kind="podcast")

        assert reading["status"] == "reading"
        assert reading["reading_progress"] == 50
        assert reading["highlights_count"] == 0

        everything = await client.get(
            "/api/learning/items", params={"projectId": project["id"]}, headers=headers
        )
        assert [i["title"] for i in everything.json()["items"]] == ["Acquired: Costco", "Zero to One"]

        podcasts = await client.get(
            "/api/learning/items", params={"projectId": project["id"], "kind": "podcast"}, headers=headers
        )
        assert [i["title"] for i in podcasts.json()["items"]] == ["Acquired: Costco"]

        queued = await client.get(
            "/api/learning/items",
            params={"projectId": project["id"], "status": "want_to_read"},
            headers=headers,
        )
        assert [i["reading_progress"] for i in queued.json()["items"]] == [0]

    @pytest.mark.asyncio
    async def test_unknown_kind_rejected_by_schema(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        response = await client.post(
            "/api/learning/items",
            json={"projectId": project["id"], "kind": "tweet", "title": "Thread"},
            headers=headers,
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_only_author_edits(self, client, team, add_item):
        project, owner, member = await team()
        item = await add_item(owner, project)

        listed = await client.get("/api/learning/items", params={"projectId": project["id"]}, headers=member)
        assert [i["id"] for i in listed.json()["items"]] == [item["id"]]

        foreign = await client.patch(
            f"/api/learning/items/{item['id']}", json={"status": "completed"}, headers=member
        )
        assert foreign.status_code == 404

        done = await client.patch(
            f"/api/learning/items/{item['id']}",
            json={"status": "completed", "rating": 5, "finished_at": "2024-06-30"},
            headers=owner,
        )
        assert done.status_code == 200
        assert done.json()["reading_progress"] == 100
        assert done.json()["rating"] == 5

    @pytest.mark.asyncio
    async def test_non_member_is_forbidden(self, client, signup, project_for):
        owner, _ = await signup("owner@example.com")
        project = await project_for(owner)
        stranger, _ = await signup("stranger@example.com")

        response = await client.get(
            "/api/learning/items", params={"projectId": project["id"]}, headers=stranger
        )
        assert response.status_code == 403


# ══════════════════════════════════════════════════════════════════════════
# Highlights
# ══════════════════════════════════════════════════════════════════════════

class TestHighlights:

    @pytest.mark.asyncio
    async def test_item_id_required(self, client, signup):
        headers, _ = await signup()
        response = await client.get("/api/learning/highlights", headers=headers)
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "itemId"

    @pytest.mark.asyncio
    async def test_listed_oldest_first_and_counted(self, client, team, add_item, add_highlight):
        project, owner, member = await team()
        item = await add_item(owner, project)
        first = await add_highlight(owner, item, "Talk about their life, not your idea", note="Rule one?")
        second = await add_highlight(member, item, "Ask about specifics in the past")

        listed = await client.get("/api/learning/highlights", params={"itemId": item["id"]}, headers=owner)
        assert [h["id"] for h in listed.json()["highlights"]] == [first["id"], second["id"]]

        items = await client.get("/api/learning/items", params={"projectId": project["id"]}, headers=owner)
        assert items.json()["items"][0]["highlights_count"] == 2

    @pytest.mark.asyncio
    async def test_stranger_cannot_highlight(self, client, signup, project_for, add_item):
        owner, _ = await signup("owner@example.com")
        project = await project_for(owner)
        item = await add_item(owner, project)
        stranger, _ = await signup("stranger@example.com")

        response = await client.post(
            "/api/learning/highlights", json={"item_id": item["id"], "text": "Mine now"}, headers=stranger
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_deleting_item_removes_highlights(self, client, signup, project_for, add_item, add_highlight):
        headers, _ = await signup()
        project = await project_for(headers)
        item = await add_item(headers, project)
        await add_highlight(headers, item, "Compliments are noise")

        deleted = await client.delete(f"/api/learning/items/{item['id']}", headers=headers)
        assert deleted.status_code == 200

        gone = await client.get("/api/learning/highlights", params={"itemId": item["id"]}, headers=headers)
        assert gone.status_code == 404


# ══════════════════════════════════════════════════════════════════════════
# Flashcards from highlights
# ══════════════════════════════════════════════════════════════════════════

class TestFlashcardsFromHighlights:

    @pytest.mark.asyncio
    async def test_converts_only_callers_highlights(self, client, team, add_item, add_highlight):
        project, owner, member = await team()
        item = await add_item(owner, project, author="Rob Fitzpatrick")
        noted = await add_highlight(owner, item, "Commitment and advancement", note="Signs of a good meeting?")
        passage = await add_highlight(owner, item, LONG_PASSAGE)
        await add_highlight(member, item, "Not the owner's highlight")

        response = await client.post(
            "/api/flashcards/from-highlights", json={"item_id": item["id"]}, headers=owner
        )
        assert response.status_code == 201
        body = response.json()
        assert body["count"] == 2
        assert body["source_item"] == {"id": item["id"], "title": "The Mom Test", "author": "Rob Fitzpatrick"}

        cards = {c["source_highlight_id"]: c for c in body["flashcards"]}
        assert cards[noted["id"]]["front"] == "Signs of a good meeting?"
        assert cards[noted["id"]]["back"] == "Commitment and advancement"
        assert cards[passage["id"]]["front"].startswith("Fill in the blank: ")
        assert cards[passage["id"]]["back"] == "every"
        assert {c["deck_name"] for c in body["flashcards"]} == {"Generated"}

        deck = await client.get(
            "/api/flashcards", params={"projectId": project["id"], "deck": "Generated"}, headers=owner
        )
        assert deck.json()["stats"]["due"] == 2
        assert deck.json()["stats"]["new"] == 2

    @pytest.mark.asyncio
    async def test_highlight_id_filter_and_deck_name(self, client, signup, project_for, add_item, add_highlight):
        headers, _ = await signup()
        project = await project_for(headers)
        item = await add_item(headers, project)
        chosen = await add_highlight(headers, item, "Keep it casual")
        await add_highlight(headers, item, "Skip the pitch")

        response = await client.post(
            "/api/flashcards/from-highlights",
            json={"item_id": item["id"], "deck_name": "Customer interviews", "highlight_ids": [chosen["id"]]},
            headers=headers,
        )
        assert response.status_code == 201
        [card] = response.json()["flashcards"]
        assert card["deck_name"] == "Customer interviews"
        assert card["front"] == "What is the key insight about: The Mom Test?"
        assert card["back"] == "Keep it casual"

    @pytest.mark.asyncio
    async def test_nothing_to_convert(self, client, team, add_item, add_highlight):
        project, owner, member = await team()
        item = await add_item(owner, project)
        await add_highlight(owner, item, "Owner only")

        response = await client.post(
            "/api/flashcards/from-highlights", json={"item_id": item["id"]}, headers=member
        )
        assert response.status_code == 400


# ══════════════════════════════════════════════════════════════════════════
# Memory collections
# ══════════════════════════════════════════════════════════════════════════

async def create_memory(client, headers, project, title, is_private=True):
    response = await client.post(
        "/api/memories",
        json={"projectId": project["id"], "title": title, "memory_date": "2024-04-12", "is_private": is_private},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


async def create_collection(client, headers, project, name, is_public=False):
    response = await client.post(
        "/api/memories/collections",
        json={"projectId": project["id"], "name": name, "is_public": is_public},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestMemoryCollections:

    @pytest.mark.asyncio
    async def test_listing_shows_own_and_public(self, client, team):
        project, owner, member = await team()
        public = await create_collection(client, owner, project, "Offsites", is_public=True)
        await create_collection(client, owner, project, "Private album")
        mine = await create_collection(client, member, project, "Member album")

        listed = await client.get(
            "/api/memories/collections", params={"projectId": project["id"]}, headers=member
        )
        assert {c["id"] for c in listed.json()["collections"]} == {public["id"], mine["id"]}

    @pytest.mark.asyncio
    async def test_add_remove_and_count(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        memory = await create_memory(client, headers, project, "Demo day")
        collection = await create_collection(client, headers, project, "Milestones")
        path = f"/api/memories/collections/{collection['id']}/memories"

        added = await client.post(path, json={"memory_id": memory["id"]}, headers=headers)
        assert added.status_code == 200
        assert added.json()["memory_count"] == 1

        duplicate = await client.post(path, json={"memory_id": memory["id"]}, headers=headers)
        assert duplicate.status_code == 409

        removed = await client.delete(f"{path}/{memory['id']}", headers=headers)
        assert removed.json()["memory_count"] == 0
        missing = await client.delete(f"{path}/{memory['id']}", headers=headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_cannot_collect_someone_elses_private_memory(self, client, team):
        project, owner, member = await team()
        private = await create_memory(client, owner, project, "First office")
        shared = await create_memory(client, owner, project, "Team offsite", is_private=False)
        collection = await create_collection(client, member, project, "Favourites")
        path = f"/api/memories/collections/{collection['id']}/memories"

        rejected = await client.post(path, json={"memory_id": private["id"]}, headers=member)
        assert rejected.status_code == 400
        assert rejected.json()["details"]["field"] == "memory_id"

        accepted = await client.post(path, json={"memory_id": shared["id"]}, headers=member)
        assert accepted.status_code == 200

        # Only the collection's author changes its contents
        foreign = await client.post(path, json={"memory_id": shared["id"]}, headers=owner)
        assert foreign.status_code == 404

    @pytest.mark.asyncio
    async def test_deleting_memory_drops_it_from_collections(self, client, signup, project_for):
        headers, _ = await signup()
        project = await project_for(headers)
        memory = await create_memory(client, headers, project, "Launch party")
        collection = await create_collection(client, headers, project, "2024")
        await client.post(
            f"/api/memories/collections/{collection['id']}/memories",
            json={"memory_id": memory["id"]},
            headers=headers,
        )

        await client.delete(f"/api/memories/{memory['id']}", headers=headers)

        listed = await client.get(
            "/api/memories/collections", params={"projectId": project["id"]}, headers=headers
        )
        assert listed.json()["collections"][0]["memory_count"] == 0

        deleted = await client.delete(f"/api/memories/collections/{collection['id']}", headers=headers)
        assert deleted.status_code == 200
