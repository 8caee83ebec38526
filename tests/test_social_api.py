import pytest
from httpx import AsyncClient

from conftest import ApiHelper

MISSING_ID = "00000000-0000-4000-8000-000000000000"


@pytest.mark.asyncio
async def test_like_toggle_parity(api: ApiHelper, client: AsyncClient) -> None:
    _, headers = await api.signup("alice")
    video = await api.publish(headers)
    url = f"/api/v1/likes/toggle/v/{video['id']}"

    states = []
    for _ in range(3):
        resp = await client.post(url, headers=headers)
        assert resp.status_code == 200
        states.append(resp.json()["data"]["liked"])

    assert states == [True, False, True]
    resp = await client.get(f"/api/v1/videos/{video['id']}")
    assert resp.json()["data"]["likesCount"] == 1


@pytest.mark.asyncio
async def test_like_unknown_targets(api: ApiHelper, client: AsyncClient) -> None:
    _, headers = await api.signup("alice")

    resp = await client.post(f"/api/v1/likes/toggle/c/{MISSING_ID}", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Comment not found"

    resp = await client.post("/api/v1/likes/toggle/t/oops", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid tweet id"


@pytest.mark.asyncio
async def test_liked_videos_lists_only_videos(api: ApiHelper, client: AsyncClient) -> None:
    _, headers = await api.signup("alice")
    liked = await api.publish(headers, title="Liked")
    await api.publish(headers, title="Ignored")
    tweet = (
        await client.post("/api/v1/tweets", json={"content": "hello"}, headers=headers)
    ).json()["data"]

    await client.post(f"/api/v1/likes/toggle/v/{liked['id']}", headers=headers)
    await client.post(f"/api/v1/likes/toggle/t/{tweet['id']}", headers=headers)

    resp = await client.get("/api/v1/likes/videos", headers=headers)
    items = resp.json()["data"]
    assert [item["video"]["title"] for item in items] == ["Liked"]
    assert items[0]["likedAt"]


@pytest.mark.asyncio
async def test_comment_lifecycle(api: ApiHelper, client: AsyncClient) -> None:
    _, alice_headers = await api.signup("alice")
    _, bob_headers = await api.signup("bob")
    video = await api.publish(alice_headers)

    resp = await client.post(
        f"/api/v1/comments/{video['id']}", json={"content": "   "}, headers=bob_headers
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Comment content is required"

    resp = await client.post(
        f"/api/v1/comments/{video['id']}", json={"content": "Great video"}, headers=bob_headers
    )
    assert resp.status_code == 201
    comment = resp.json()["data"]
    assert comment["videoId"] == video["id"]

    await client.post(f"/api/v1/likes/toggle/c/{comment['id']}", headers=alice_headers)

    resp = await client.get(f"/api/v1/comments/{video['id']}")
    page = resp.json()["data"]
    assert page["total"] == 1
    assert page["items"][0]["owner"]["username"] == "bob"
    assert page["items"][0]["likesCount"] == 1

    resp = await client.patch(
        f"/api/v1/comments/c/{comment['id']}", json={"content": "Edited"}, headers=alice_headers
    )
    assert resp.status_code == 403

    resp = await client.patch(
        f"/api/v1/comments/c/{comment['id']}", json={"content": "Edited"}, headers=bob_headers
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["content"] == "Edited"

    resp = await client.delete(f"/api/v1/comments/c/{comment['id']}", headers=bob_headers)
    assert resp.status_code == 200

    resp = await client.get(f"/api/v1/comments/{video['id']}")
    assert resp.json()["data"]["total"] == 0


@pytest.mark.asyncio
async def test_comment_on_missing_video(api: ApiHelper, client: AsyncClient) -> None:
    _, headers = await api.signup("alice")
    resp = await client.post(
        f"/api/v1/comments/{MISSING_ID}", json={"content": "Hello"}, headers=headers
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_tweet_lifecycle(api: ApiHelper, client: AsyncClient) -> None:
    alice, alice_headers = await api.signup("alice")
    _, bob_headers = await api.signup("bob")

    resp = await client.post("/api/v1/tweets", json={}, headers=alice_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Tweet content required"

    resp = await client.post(
        "/api/v1/tweets", json={"content": "First tweet"}, headers=alice_headers
    )
    assert resp.status_code == 201
    tweet = resp.json()["data"]

    await client.post(f"/api/v1/likes/toggle/t/{tweet['id']}", headers=bob_headers)

    resp = await client.get(f"/api/v1/tweets/user/{alice['id']}")
    tweets = resp.json()["data"]
    assert [t["content"] for t in tweets] == ["First tweet"]
    assert tweets[0]["likesCount"] == 1

    resp = await client.patch(
        f"/api/v1/tweets/{tweet['id']}", json={"content": "Hacked"}, headers=bob_headers
    )
    assert resp.status_code == 403

    resp = await client.patch(
        f"/api/v1/tweets/{tweet['id']}", json={"content": "Edited"}, headers=alice_headers
    )
    assert resp.json()["data"]["content"] == "Edited"

    resp = await client.delete(f"/api/v1/tweets/{tweet['id']}", headers=alice_headers)
    assert resp.status_code == 200
    resp = await client.get(f"/api/v1/tweets/user/{alice['id']}")
    assert resp.json()["data"] == []

    resp = await client.get(f"/api/v1/tweets/user/{MISSING_ID}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_subscription_toggle(api: ApiHelper, client: AsyncClient) -> None:
    channel, _ = await api.signup("creator")
    fan, fan_headers = await api.signup("fan")
    url = f"/api/v1/subscriptions/c/{channel['id']}"

    resp = await client.post(url, headers=fan_headers)
    assert resp.status_code == 201
    assert resp.json()["data"]["subscribed"] is True

    resp = await client.get(url, headers=fan_headers)
    data = resp.json()["data"]
    assert data["subscribersCount"] == 1
    assert data["isSubscribed"] is True
    assert [s["username"] for s in data["subscribers"]] == ["fan"]

    resp = await client.get(f"/api/v1/subscriptions/u/{fan['id']}")
    assert [c["channel"]["username"] for c in resp.json()["data"]] == ["creator"]

    resp = await client.post(url, headers=fan_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["subscribed"] is False

    resp = await client.get(url)
    data = resp.json()["data"]
    assert data["subscribersCount"] == 0
    assert data["subscribers"] == []


@pytest.mark.asyncio
async def test_subscribe_to_missing_channel(api: ApiHelper, client: AsyncClient) -> None:
    _, headers = await api.signup("fan")
    resp = await client.post(f"/api/v1/subscriptions/c/{MISSING_ID}", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Channel does not exist"


@pytest.mark.asyncio
async def test_playlist_lifecycle(api: ApiHelper, client: AsyncClient) -> None:
    alice, headers = await api.signup("alice")
    _, bob_headers = await api.signup("bob")
    first = await api.publish(headers, title="First")
    second = await api.publish(headers, title="Second")

    resp = await client.post("/api/v1/playlists", json={"name": "Mix"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Name & description required"

    resp = await client.post(
        "/api/v1/playlists", json={"name": "Mix", "description": "Favourites"}, headers=headers
    )
    assert resp.status_code == 201
    playlist = resp.json()["data"]
    assert playlist["totalVideos"] == 0

    for video in (first, second, first):
        resp = await client.patch(
            f"/api/v1/playlists/add/{video['id']}/{playlist['id']}", headers=headers
        )
        assert resp.status_code == 200
    assert resp.json()["data"]["totalVideos"] == 2

    resp = await client.patch(
        f"/api/v1/playlists/add/{first['id']}/{playlist['id']}", headers=bob_headers
    )
    assert resp.status_code == 403

    resp = await client.get(f"/api/v1/playlists/{playlist['id']}")
    detail = resp.json()["data"]
    assert [v["title"] for v in detail["videos"]] == ["First", "Second"]

    resp = await client.patch(
        f"/api/v1/playlists/remove/{first['id']}/{playlist['id']}", headers=headers
    )
    assert resp.json()["data"]["totalVideos"] == 1

    resp = await client.patch(
        f"/api/v1/playlists/remove/{first['id']}/{playlist['id']}", headers=headers
    )
    assert resp.status_code == 404
    assert resp.json()["message"] == "Video is not in this playlist"

    resp = await client.patch(
        f"/api/v1/playlists/{playlist['id']}", json={"name": "Renamed"}, headers=headers
    )
    assert resp.json()["data"]["name"] == "Renamed"

    resp = await client.get(f"/api/v1/playlists/user/{alice['id']}")
    assert [(p["name"], p["totalVideos"]) for p in resp.json()["data"]] == [("Renamed", 1)]

    resp = await client.delete(f"/api/v1/playlists/{playlist['id']}", headers=bob_headers)
    assert resp.status_code == 403

    resp = await client.delete(f"/api/v1/playlists/{playlist['id']}", headers=headers)
    assert resp.status_code == 200
    resp = await client.get(f"/api/v1/playlists/{playlist['id']}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_dashboard_stats(api: ApiHelper, client: AsyncClient) -> None:
    creator, headers = await api.signup("creator")
    _, fan_headers = await api.signup("fan")
    video = await api.publish(headers, title="Hit")
    other = await api.publish(fan_headers, title="Elsewhere")

    await client.post(f"/api/v1/subscriptions/c/{creator['id']}", headers=fan_headers)
    await client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=fan_headers)
    await client.post(f"/api/v1/likes/toggle/v/{other['id']}", headers=headers)
    await client.post(f"/api/v1/users/history/{video['id']}", headers=fan_headers)
    await client.post(f"/api/v1/users/history/{video['id']}", headers=headers)

    resp = await client.get("/api/v1/dashboard/stats", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "totalVideos": 1,
        "totalViews": 2,
        "totalSubscribers": 1,
        "totalLikes": 1,
    }

    resp = await client.get("/api/v1/dashboard/videos", headers=headers)
    assert [v["title"] for v in resp.json()["data"]] == ["Hit"]

    resp = await client.get("/api/v1/dashboard/stats")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_hidden_video_is_unreachable_for_others(
    api: ApiHelper, client: AsyncClient
) -> None:
    _, alice_headers = await api.signup("alice")
    _, bob_headers = await api.signup("bob")
    video = await api.publish(alice_headers, title="Secret")
    kept = await api.publish(alice_headers, title="Public")

    comment = (
        await client.post(
            f"/api/v1/comments/{video['id']}", json={"content": "Early"}, headers=bob_headers
        )
    ).json()["data"]
    await client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=bob_headers)
    await client.post(f"/api/v1/users/history/{video['id']}", headers=bob_headers)
    playlist = (
        await client.post(
            "/api/v1/playlists",
            json={"name": "Later", "description": "Watch later"},
            headers=bob_headers,
        )
    ).json()["data"]
    for item in (video, kept):
        await client.patch(
            f"/api/v1/playlists/add/{item['id']}/{playlist['id']}", headers=bob_headers
        )

    await client.patch(f"/api/v1/videos/{video['id']}/toggle-publish", headers=alice_headers)

    for headers in (bob_headers, {}):
        resp = await client.get(f"/api/v1/comments/{video['id']}", headers=headers)
        assert resp.status_code == 404
    resp = await client.get(f"/api/v1/comments/{video['id']}", headers=alice_headers)
    assert resp.json()["data"]["total"] == 1

    resp = await client.post(
        f"/api/v1/comments/{video['id']}", json={"content": "Still here?"}, headers=bob_headers
    )
    assert resp.status_code == 404
    resp = await client.post(f"/api/v1/likes/toggle/v/{video['id']}", headers=bob_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Video not found"
    resp = await client.post(f"/api/v1/likes/toggle/c/{comment['id']}", headers=bob_headers)
    assert resp.status_code == 404

    resp = await client.patch(
        f"/api/v1/playlists/remove/{video['id']}/{playlist['id']}", headers=bob_headers
    )
    assert resp.status_code == 200
    resp = await client.patch(
        f"/api/v1/playlists/add/{video['id']}/{playlist['id']}", headers=bob_headers
    )
    assert resp.status_code == 404

    resp = await client.get("/api/v1/likes/videos", headers=bob_headers)
    assert resp.json()["data"] == []
    resp = await client.get("/api/v1/users/history", headers=bob_headers)
    assert resp.json()["data"] == []


@pytest.mark.asyncio
async def test_playlist_detail_hides_unpublished_members(
    api: ApiHelper, client: AsyncClient
) -> None:
    _, alice_headers = await api.signup("alice")
    bob, bob_headers = await api.signup("bob")
    hidden = await api.publish(alice_headers, title="Draft")
    shown = await api.publish(alice_headers, title="Live")
    playlist = (
        await client.post(
            "/api/v1/playlists",
            json={"name": "Mix", "description": "Favourites"},
            headers=bob_headers,
        )
    ).json()["data"]
    for item in (hidden, shown):
        await client.patch(
            f"/api/v1/playlists/add/{item['id']}/{playlist['id']}", headers=bob_headers
        )
    await client.patch(f"/api/v1/videos/{hidden['id']}/toggle-publish", headers=alice_headers)

    for headers in ({}, bob_headers):
        resp = await client.get(f"/api/v1/playlists/{playlist['id']}", headers=headers)
        detail = resp.json()["data"]
        assert [v["title"] for v in detail["videos"]] == ["Live"]
        assert detail["totalVideos"] == 1

    resp = await client.get(f"/api/v1/playlists/{playlist['id']}", headers=alice_headers)
    assert [v["title"] for v in resp.json()["data"]["videos"]] == ["Draft", "Live"]

    resp = await client.get(f"/api/v1/playlists/user/{bob['id']}")
    assert [p["totalVideos"] for p in resp.json()["data"]] == [1]
