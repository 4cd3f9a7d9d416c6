# tests/test_announcements.py
"""Tests for owner announcements."""
from fastapi import status

from app.core.config import get_settings

API = get_settings().API_V1_STR


def _post(client, identity, community_id, **body):
    payload = {"title": "Water outage", "message": "Tomorrow 9-11am"}
    payload.update(body)
    return client.post(
        f"{API}/communities/{community_id}/announcements",
        json=payload,
        headers=identity["headers"],
    )


def test_owner_creates_announcement(client, owner, community, store) -> None:
    r = _post(client, owner, community["id"], priority="urgent")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["success"] is True
    announcement = data["announcement"]
    assert announcement["id"].startswith("announcement_")
    assert announcement["title"] == "Water outage"
    assert announcement["priority"] == "urgent"
    assert announcement["createdBy"] == owner["id"]
    assert announcement["createdByName"] == owner["name"]

    stored = store(f"community:{community['id']}:announcements")
    assert [a["id"] for a in stored] == [announcement["id"]]


def test_priority_defaults_to_normal(client, owner, community) -> None:
    r = _post(client, owner, community["id"])
    assert r.json()["announcement"]["priority"] == "normal"


def test_unknown_priority_is_rejected(client, owner, community) -> None:
    r = _post(client, owner, community["id"], priority="critical")
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_title_and_message_required(client, owner, community) -> None:
    r = _post(client, owner, community["id"], title="   ")
    assert r.status_code == status.HTTP_400_BAD_REQUEST

    r = client.post(
        f"{API}/communities/{community['id']}/announcements",
        json={"title": "Only a title"},
        headers=owner["headers"],
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_non_owner_cannot_post(client, resident, community, join_code, store) -> None:
    """Even a resident of the community gets 403 and nothing is stored."""
    client.post(f"{API}/communities/join", json={"joinCode": join_code}, headers=resident["headers"])

    r = _post(client, resident, community["id"])
    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert r.json()["error"] == "Only community owner can create announcements"
    assert store(f"community:{community['id']}:announcements") is None


def test_post_to_unknown_community_is_404(client, owner, community) -> None:
    r = _post(client, owner, "community_0_NOPE00")
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_members_read_newest_first(client, owner, resident, community, join_code) -> None:
    client.post(f"{API}/communities/join", json={"joinCode": join_code}, headers=resident["headers"])
    _post(client, owner, community["id"], title="First")
    _post(client, owner, community["id"], title="Second")

    r = client.get(
        f"{API}/communities/{community['id']}/announcements",
        headers=resident["headers"],
    )
    assert r.status_code == status.HTTP_200_OK
    titles = [a["title"] for a in r.json()["announcements"]]
    assert titles == ["Second", "First"]


def test_empty_announcement_list(client, owner, community) -> None:
    r = client.get(
        f"{API}/communities/{community['id']}/announcements",
        headers=owner["headers"],
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"announcements": []}


def test_non_member_cannot_read(client, outsider, community) -> None:
    r = client.get(
        f"{API}/communities/{community['id']}/announcements",
        headers=outsider["headers"],
    )
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_list_is_capped_and_evicts_oldest(client, owner, community, store) -> None:
    limit = get_settings().ANNOUNCEMENT_LIMIT
    for i in range(limit + 1):
        r = _post(client, owner, community["id"], title=f"Notice {i}")
        assert r.status_code == status.HTTP_200_OK

    stored = store(f"community:{community['id']}:announcements")
    assert len(stored) == limit
    assert stored[0]["title"] == f"Notice {limit}"
    assert stored[-1]["title"] == "Notice 1"
    assert all(a["title"] != "Notice 0" for a in stored)
