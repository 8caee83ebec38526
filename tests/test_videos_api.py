import pytest
from httpx import AsyncClient

from conftest import ApiHelper, FakeStorage, image_file, video_file

MISSING_ID = "00000000-0000-4000-8000-000000000000"


@pytest.mark.asyncio
async def test_publish_video(api: ApiHelper) -> None:
    user, headers = await api.signup("alice")

    video = await api.publish(headers, title="  Trip  ", description="Mountains")

    assert video["title"] == "Trip"
    assert video["ownerId"] == user["id"]
    assert video["isPublished"] is True
    assert video["views"] == 0
    assert video["videoUrl"].startswith("https://media.test/videos/")
    assert video["thumbnailUrl"].startswith("https://media.test/images/")


@pytest.mark.asyncio
async def test_publish_requires_files(api: ApiHelper, client: AsyncClient) -> None:
    _, headers = await api.signup("alice")

    resp = await client.post(
        "/api/v1/videos",
        data={"title": "Trip", "description": "Mountains"},
        files={"videoFile": video_file()},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Video and thumbnail required"

    resp = await client.post(
        "/api/v1/videos",
        data={"description": "Mountains"},
        files={"videoFile": video_file(), "thumbnail": image_file()},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Title is required"


@pytest.mark.asyncio
async def test_publish_requires_auth(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/v1/videos",
        data={"title": "Trip", "description": "Mountains"},
        files={"videoFile": video_file(), "thumbnail": image_file()},
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_list_videos_paginates_and_sorts(api: ApiHelper, client: AsyncClient) -> None:
    _, headers = await api.signup("alice")
    for title in ("Cooking pasta", "Alpine hike", "Budget travel"):
        await api.publish(headers, title=title)

    resp = await client.get(
        "/api/v1/videos", params={"sortBy": "title", "sortType": "asc", "limit": 2}
    )
    assert resp.status_code == 200
    page = resp.json()["data"]
    assert [v["title"] for v in page["items"]] == ["Alpine hike", "Budget travel"]
    assert page["total"] == 3
    assert page["totalPages"] == 2

    resp = await client.get(
        "/api/v1/videos",
        params={"sortBy": "title", "sortType": "asc", "limit": 2, "page": 2},
    )
    assert [v["title"] for v in resp.json()["data"]["items"]] == ["Cooking pasta"]


@pytest.mark.asyncio
async def test_list_videos_filters(api: ApiHelper, client: AsyncClient) -> None:
    alice, alice_headers = await api.signup("alice")
    _, bob_headers = await api.signup("bob")
    await api.publish(alice_headers, title="Cat tricks")
    await api.publish(alice_headers, title="100% cotton")
    await api.publish(bob_headers, title="Cat naps")

    resp = await client.get("/api/v1/videos", params={"query": "cat"})
    titles = {v["title"] for v in resp.json()["data"]["items"]}
    assert titles == {"Cat tricks", "Cat naps"}

    resp = await client.get("/api/v1/videos", params={"query": "%"})
    assert [v["title"] for v in resp.json()["data"]["items"]] == ["100% cotton"]

    resp = await client.get("/api/v1/videos", params={"userId": alice["id"]})
    assert resp.json()["data"]["total"] == 2


@pytest.mark.asyncio
async def test_list_videos_rejects_bad_sort(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/videos", params={"sortBy": "password"})
    assert resp.status_code == 400

    resp = await client.get("/api/v1/videos", params={"sortType": "sideways"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "sortType must be asc or desc"

    resp = await client.get("/api/v1/videos", params={"userId": "nope"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid user id"


@pytest.mark.asyncio
async def test_get_video_detail(api: ApiHelper, client: AsyncClient) -> None:
    _, headers = await api.signup("alice")
    video = await api.publish(headers)

    await client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=headers)

    resp = await client.get(f"/api/v1/videos/{video['id']}", headers=headers)
    assert resp.status_code == 200
    detail = resp.json()["data"]
    assert detail["owner"]["username"] == "alice"
    assert detail["likesCount"] == 1
    assert detail["isLiked"] is True

    resp = await client.get(f"/api/v1/videos/{video['id']}")
    assert resp.json()["data"]["isLiked"] is False


@pytest.mark.asyncio
async def test_get_video_errors(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/videos/not-a-uuid")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid video id"

    resp = await client.get(f"/api/v1/videos/{MISSING_ID}")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Video not found"


@pytest.mark.asyncio
async def test_unpublished_video_is_hidden(api: ApiHelper, client: AsyncClient) -> None:
    _, owner_headers = await api.signup("alice")
    _, other_headers = await api.signup("bob")
    video = await api.publish(owner_headers)

    resp = await client.patch(
        f"/api/v1/videos/{video['id']}/toggle-publish", headers=owner_headers
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["isPublished"] is False

    resp = await client.get("/api/v1/videos")
    assert resp.json()["data"]["total"] == 0

    resp = await client.get(f"/api/v1/videos/{video['id']}", headers=other_headers)
    assert resp.status_code == 404

    resp = await client.get(f"/api/v1/videos/{video['id']}", headers=owner_headers)
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_only_owner_modifies_video(api: ApiHelper, client: AsyncClient) -> None:
    _, owner_headers = await api.signup("alice")
    _, other_headers = await api.signup("bob")
    video = await api.publish(owner_headers)

    resp = await client.patch(
        f"/api/v1/videos/{video['id']}", data={"title": "Hijacked"}, headers=other_headers
    )
    assert resp.status_code == 403

    resp = await client.delete(f"/api/v1/videos/{video['id']}", headers=other_headers)
    assert resp.status_code == 403

    resp = await client.patch(
        f"/api/v1/videos/{video['id']}/toggle-publish", headers=other_headers
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_video(
    api: ApiHelper, client: AsyncClient, storage: FakeStorage
) -> None:
    _, headers = await api.signup("alice")
    video = await api.publish(headers)

    resp = await client.patch(f"/api/v1/videos/{video['id']}", data={}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Nothing to update"

    resp = await client.patch(
        f"/api/v1/videos/{video['id']}",
        data={"title": "Renamed"},
        files={"thumbnail": image_file("new-thumb.png")},
        headers=headers,
    )
    assert resp.status_code == 200
    updated = resp.json()["data"]
    assert updated["title"] == "Renamed"
    assert updated["description"] == video["description"]
    assert updated["thumbnailUrl"] != video["thumbnailUrl"]
    assert storage.deleted == [video["thumbnailUrl"].removeprefix("https://media.test/")]


@pytest.mark.asyncio
async def test_delete_video_cascades(
    api: ApiHelper, client: AsyncClient, storage: FakeStorage
) -> None:
    _, headers = await api.signup("alice")
    video = await api.publish(headers)
    resp = await client.post(
        f"/api/v1/comments/{video['id']}", json={"content": "Nice"}, headers=headers
    )
    assert resp.status_code == 201
    await client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=headers)
    await client.post(f"/api/v1/users/history/{video['id']}", headers=headers)

    resp = await client.delete(f"/api/v1/videos/{video['id']}", headers=headers)
    assert resp.status_code == 200
    assert sorted(storage.deleted) == sorted(
        url.removeprefix("https://media.test/")
        for url in (video["videoUrl"], video["thumbnailUrl"])
    )

    resp = await client.get(f"/api/v1/videos/{video['id']}", headers=headers)
    assert resp.status_code == 404
    resp = await client.get(f"/api/v1/comments/{video['id']}")
    assert resp.status_code == 404
    resp = await client.get("/api/v1/likes/videos", headers=headers)
    assert resp.json()["data"] == []
    resp = await client.get("/api/v1/users/history", headers=headers)
    assert resp.json()["data"] == []


@pytest.mark.asyncio
async def test_watch_history_most_recent_first(api: ApiHelper, client: AsyncClient) -> None:
    _, headers = await api.signup("alice")
    first = await api.publish(headers, title="First")
    second = await api.publish(headers, title="Second")

    for video in (first, second, first):
        resp = await client.post(f"/api/v1/users/history/{video['id']}", headers=headers)
        assert resp.status_code == 200

    resp = await client.get("/api/v1/users/history", headers=headers)
    history = resp.json()["data"]
    assert [item["title"] for item in history] == ["First", "Second"]
    assert history[0]["owner"]["username"] == "alice"
    assert history[0]["views"] == 2

    resp = await client.post(f"/api/v1/users/history/{MISSING_ID}", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_publish_records_probed_duration(
    api: ApiHelper, monkeypatch: pytest.MonkeyPatch
) -> None:
    _, headers = await api.signup("alice")

    monkeypatch.setattr("vidshare.services.media_service._probe_duration", lambda path: 42.5)
    video = await api.publish(headers, title="Known")
    assert video["duration"] == 42.5

    monkeypatch.setattr("vidshare.services.media_service._probe_duration", lambda path: None)
    video = await api.publish(headers, title="Unknown")
    assert video["duration"] is None


@pytest.mark.asyncio
async def test_publish_discards_video_when_thumbnail_rejected(
    api: ApiHelper, client: AsyncClient, storage: FakeStorage
) -> None:
    _, headers = await api.signup("alice")

    resp = await client.post(
        "/api/v1/videos",
        data={"title": "Trip", "description": "Mountains"},
        files={"videoFile": video_file(), "thumbnail": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )

    assert resp.status_code == 400
    video_objects = [name for name, _ in storage.uploaded if name.startswith("videos/")]
    assert len(video_objects) == 1
    assert storage.deleted == video_objects


@pytest.mark.asyncio
async def test_video_ids_are_case_insensitive(api: ApiHelper, client: AsyncClient) -> None:
    _, headers = await api.signup("alice")
    video = await api.publish(headers)
    upper_id = video["id"].upper()

    resp = await client.get(f"/api/v1/videos/{upper_id}")
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == video["id"]

    resp = await client.post(f"/api/v1/likes/toggle/v/{upper_id}", headers=headers)
    assert resp.json()["data"]["liked"] is True

    resp = await client.get(f"/api/v1/videos/{video['id']}", headers=headers)
    assert resp.json()["data"]["isLiked"] is True
    assert resp.json()["data"]["likesCount"] == 1


@pytest.mark.asyncio
async def test_stale_cookie_browses_anonymously(api: ApiHelper, client: AsyncClient) -> None:
    _, headers = await api.signup("alice")
    video = await api.publish(headers)
    await client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=headers)
    stale = {"Cookie": "accessToken=expired.or.garbage"}

    resp = await client.get(f"/api/v1/videos/{video['id']}", headers=stale)
    assert resp.status_code == 200
    assert resp.json()["data"]["isLiked"] is False

    resp = await client.get(f"/api/v1/comments/{video['id']}", headers=stale)
    assert resp.status_code == 200

    resp = await client.get("/api/v1/users/c/alice", headers=stale)
    assert resp.status_code == 200
    assert resp.json()["data"]["isSubscribed"] is False

    resp = await client.get(f"/api/v1/videos/{video['id']}", headers={**stale, **headers})
    assert resp.json()["data"]["isLiked"] is True

    resp = await client.get(
        f"/api/v1/videos/{video['id']}", headers={"Authorization": "Basic abc"}
    )
    assert resp.status_code == 401

    resp = await client.get("/api/v1/users/current-user", headers=stale)
    assert resp.status_code == 401
