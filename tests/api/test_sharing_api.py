"""HTTP tests for the sharing API (camelCase bodies, identity header, error mapping)."""

import pytest
from httpx import AsyncClient

from vendorflow.infrastructure.persistence.repositories import DocumentDirectory

API = "/api/v1"


def _as(user_id: str) -> dict[str, str]:
    return {"X-User-ID": user_id}


def _token(share_link: str) -> str:
    return share_link.rsplit("/", 1)[-1]


async def _grant(client: AsyncClient, granter: str, grantee: str, **overrides):
    body = {
        "granteeUserId": grantee,
        "documentTypes": ["w9"],
        "canRelay": True,
        "maxChainDepth": 2,
        **overrides,
    }
    return await client.post(
        f"{API}/users/{granter}/sharing-permissions", json=body, headers=_as(granter)
    )


@pytest.fixture
async def shared_doc(client: AsyncClient, documents: DocumentDirectory) -> dict:
    """doc-42 owned by user-a, granted to and shared with user-b."""
    await documents.register("doc-42", "user-a", "w9", "vendor-w9.pdf")
    assert (await _grant(client, "user-a", "user-b")).status_code == 201
    response = await client.post(
        f"{API}/documents/doc-42/share",
        json={"toUserId": "user-b", "shareReason": "vendor onboarding"},
        headers=_as("user-a"),
    )
    assert response.status_code == 201
    return response.json()


async def test_share_returns_chain_link_and_provenance(shared_doc: dict) -> None:
    chain = shared_doc["chain"]
    assert chain["fromUserId"] == "user-a"
    assert chain["toUserId"] == "user-b"
    assert chain["parentChainId"] is None
    assert chain["depth"] == 1
    assert chain["maxChainDepth"] == 2
    assert chain["status"] == "active"
    assert chain["permissions"] == {"canRelay": True, "canView": True, "canDownload": True}
    assert "shareToken" not in chain
    assert shared_doc["shareLink"].startswith("http://localhost:5000/shared/")
    assert shared_doc["provenance"]["accessPath"] == ["user-a", "user-b"]
    assert shared_doc["provenance"]["totalShares"] == 1


async def test_relay_access_history_and_revoke_flow(
    client: AsyncClient, shared_doc: dict
) -> None:
    root_token = _token(shared_doc["shareLink"])
    relay = await client.post(
        f"{API}/chains/relay",
        json={"parentToken": root_token, "toUserId": "user-c"},
        headers=_as("user-b"),
    )
    assert relay.status_code == 201
    relay_data = relay.json()
    assert relay_data["chainPath"] == ["user-a", "user-b", "user-c"]
    assert relay_data["chain"]["depth"] == 2
    relay_token = _token(relay_data["shareLink"])

    too_deep = await client.post(
        f"{API}/chains/relay",
        json={"parentToken": relay_token, "toUserId": "user-e"},
        headers=_as("user-c"),
    )
    assert too_deep.status_code == 409
    assert too_deep.json()["error"] == "DEPTH_EXCEEDED"

    access = await client.get(f"{API}/chains/access/{relay_token}")
    assert access.status_code == 200
    access_data = access.json()
    assert access_data["document"]["id"] == "doc-42"
    assert access_data["document"]["fileName"] == "vendor-w9.pdf"
    assert access_data["chainPath"] == ["user-a", "user-b", "user-c"]
    assert access_data["chainDepth"] == 2

    history = await client.get(f"{API}/documents/doc-42/chain-history", headers=_as("user-a"))
    assert history.status_code == 200
    history_data = history.json()
    assert len(history_data["chainHistory"]) == 2
    assert history_data["provenance"]["currentHolderId"] == "user-c"
    assert len(history_data["visualizationData"]["nodes"]) == 3
    assert len(history_data["visualizationData"]["edges"]) == 2

    revoke = await client.post(
        f"{API}/chains/{shared_doc['chain']['id']}/revoke", headers=_as("user-a")
    )
    assert revoke.status_code == 200
    revoke_data = revoke.json()
    assert revoke_data["revokedChain"]["status"] == "revoked"
    assert len(revoke_data["revokedChainIds"]) == 2

    gone = await client.get(f"{API}/chains/access/{relay_token}")
    assert gone.status_code == 410
    assert gone.json()["error"] == "SHARE_EXPIRED"


async def test_relay_with_offset_free_expiry(
    client: AsyncClient, documents: DocumentDirectory
) -> None:
    await documents.register("doc-7", "user-a", "w9", "w9.pdf")
    await _grant(client, "user-a", "user-b")
    root = await client.post(
        f"{API}/documents/doc-7/share",
        json={"toUserId": "user-b", "expiresAt": "2099-01-01T00:00:00Z"},
        headers=_as("user-a"),
    )
    assert root.status_code == 201

    relay = await client.post(
        f"{API}/chains/relay",
        json={
            "parentToken": _token(root.json()["shareLink"]),
            "toUserId": "user-c",
            "expiresAt": "2098-01-01T00:00:00",
        },
        headers=_as("user-b"),
    )
    assert relay.status_code == 201
    assert relay.json()["chain"]["expiresAt"].startswith("2098-01-01T00:00:00")
    assert relay.json()["chainPath"] == ["user-a", "user-b", "user-c"]


async def test_share_without_identity_is_unauthorized(
    client: AsyncClient, documents: DocumentDirectory
) -> None:
    await documents.register("doc-42", "user-a", "w9")
    response = await client.post(f"{API}/documents/doc-42/share", json={"toUserId": "user-b"})
    assert response.status_code == 401


async def test_share_without_grant_forbidden(
    client: AsyncClient, documents: DocumentDirectory
) -> None:
    await documents.register("doc-42", "user-a", "w9")
    response = await client.post(
        f"{API}/documents/doc-42/share", json={"toUserId": "user-b"}, headers=_as("user-a")
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"


async def test_share_body_validation(client: AsyncClient) -> None:
    response = await client.post(
        f"{API}/documents/doc-42/share", json={"toUserId": ""}, headers=_as("user-a")
    )
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_share_unknown_document(client: AsyncClient) -> None:
    response = await client.post(
        f"{API}/documents/missing/share", json={"toUserId": "user-b"}, headers=_as("user-a")
    )
    assert response.status_code == 404


async def test_self_share_is_bad_request(
    client: AsyncClient, documents: DocumentDirectory
) -> None:
    await documents.register("doc-42", "user-a", "w9")
    response = await client.post(
        f"{API}/documents/doc-42/share", json={"toUserId": "user-a"}, headers=_as("user-a")
    )
    assert response.status_code == 400


async def test_unknown_token_not_found(client: AsyncClient) -> None:
    response = await client.get(f"{API}/chains/access/this-token-does-not-exist")
    assert response.status_code == 404
    assert "this-token-does-not-exist" not in response.text


async def test_history_denied_to_stranger(client: AsyncClient, shared_doc: dict) -> None:
    response = await client.get(f"{API}/documents/doc-42/chain-history", headers=_as("user-z"))
    assert response.status_code == 403


async def test_history_requires_identity(client: AsyncClient, shared_doc: dict) -> None:
    response = await client.get(f"{API}/documents/doc-42/chain-history")
    assert response.status_code == 401
    assert "provenance" not in response.json()


async def test_permissions_crud(client: AsyncClient) -> None:
    created = await _grant(client, "user-a", "user-b", documentTypes=["w9", "banking"])
    assert created.status_code == 201
    permission = created.json()
    assert permission["documentTypes"] == ["banking", "w9"]
    assert permission["status"] == "active"

    updated = await client.put(
        f"{API}/users/user-a/sharing-permissions/{permission['id']}",
        json={"canViewHistory": True, "maxChainDepth": -1},
        headers=_as("user-a"),
    )
    assert updated.status_code == 200
    assert updated.json()["canViewHistory"] is True
    assert updated.json()["maxChainDepth"] == -1

    listed = await client.get(f"{API}/users/user-b/sharing-permissions", headers=_as("user-b"))
    assert [p["id"] for p in listed.json()] == [permission["id"]]

    revoked = await client.delete(
        f"{API}/users/user-a/sharing-permissions/{permission['id']}", headers=_as("user-a")
    )
    assert revoked.status_code == 200
    assert revoked.json() == {"success": True}
    listed = await client.get(f"{API}/users/user-a/sharing-permissions", headers=_as("user-a"))
    assert listed.json()[0]["status"] == "revoked"


async def test_grant_validation_errors(client: AsyncClient) -> None:
    unknown_type = await _grant(client, "user-a", "user-b", documentTypes=["passport"])
    assert unknown_type.status_code == 400
    too_deep = await _grant(client, "user-a", "user-b", maxChainDepth=50)
    assert too_deep.status_code == 400
    empty = await _grant(client, "user-a", "user-b", documentTypes=[])
    assert empty.status_code == 422


async def test_user_routes_only_serve_caller(client: AsyncClient) -> None:
    response = await client.get(f"{API}/users/user-a/sharing-permissions", headers=_as("user-b"))
    assert response.status_code == 403


async def test_grantee_cannot_update_grant(client: AsyncClient) -> None:
    permission = (await _grant(client, "user-a", "user-b")).json()
    response = await client.put(
        f"{API}/users/user-b/sharing-permissions/{permission['id']}",
        json={"canRelay": False},
        headers=_as("user-b"),
    )
    assert response.status_code == 403


async def test_notifications_inbox_read_and_respond(
    client: AsyncClient, shared_doc: dict
) -> None:
    inbox = await client.get(f"{API}/users/user-b/sharing-notifications", headers=_as("user-b"))
    assert inbox.status_code == 200
    inbox_data = inbox.json()
    assert inbox_data["unreadCount"] == 1
    request = inbox_data["notifications"][0]
    assert request["type"] == "share_request"
    assert request["chainId"] == shared_doc["chain"]["id"]
    assert request["metadata"]["shareLink"] == shared_doc["shareLink"]

    answer = await client.post(
        f"{API}/notifications/{request['id']}/respond",
        json={"accept": False},
        headers=_as("user-b"),
    )
    assert answer.status_code == 200
    assert answer.json()["type"] == "share_rejected"
    assert answer.json()["toUserId"] == "user-a"

    unread = await client.get(
        f"{API}/users/user-b/sharing-notifications",
        params={"unreadOnly": "true"},
        headers=_as("user-b"),
    )
    assert unread.json()["unreadCount"] == 0

    again = await client.post(
        f"{API}/notifications/{request['id']}/respond",
        json={"accept": True},
        headers=_as("user-b"),
    )
    assert again.status_code == 400

    access = await client.get(f"{API}/chains/access/{_token(shared_doc['shareLink'])}")
    assert access.status_code == 410


async def test_mark_read(client: AsyncClient, shared_doc: dict) -> None:
    inbox = await client.get(f"{API}/users/user-b/sharing-notifications", headers=_as("user-b"))
    notification_id = inbox.json()["notifications"][0]["id"]

    denied = await client.post(f"{API}/notifications/{notification_id}/read", headers=_as("user-c"))
    assert denied.status_code == 403

    ok = await client.post(f"{API}/notifications/{notification_id}/read", headers=_as("user-b"))
    assert ok.status_code == 200
    assert ok.json() == {"success": True}

    inbox = await client.get(f"{API}/users/user-b/sharing-notifications", headers=_as("user-b"))
    assert inbox.json()["unreadCount"] == 0


async def test_sharing_stats(client: AsyncClient, shared_doc: dict) -> None:
    response = await client.get(f"{API}/users/user-a/sharing-stats", headers=_as("user-a"))
    assert response.status_code == 200
    assert response.json() == {
        "userId": "user-a",
        "totalDocumentsShared": 1,
        "totalActiveChains": 1,
        "totalRecipients": 1,
        "totalReceived": 0,
    }


async def test_expire_sweep(client: AsyncClient, documents: DocumentDirectory) -> None:
    await documents.register("doc-42", "user-a", "w9")
    await _grant(client, "user-a", "user-b")
    share = await client.post(
        f"{API}/documents/doc-42/share",
        json={"toUserId": "user-b", "expiresAt": "2020-01-01T00:00:00Z"},
        headers=_as("user-a"),
    )
    assert share.status_code == 201

    swept = await client.post(f"{API}/chains/expire", headers=_as("ops"))
    assert swept.json() == {"expiredChainIds": [share.json()["chain"]["id"]]}


async def test_token_access_is_rate_limited(client: AsyncClient) -> None:
    statuses = [
        (await client.get(f"{API}/chains/access/guess-{i:04d}-aaaaaaaaaaaa")).status_code
        for i in range(31)
    ]
    assert statuses[:30] == [404] * 30
    assert statuses[30] == 429
