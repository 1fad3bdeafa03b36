import pytest

from test.factories import SwapCreateFactory, auth_header


@pytest.fixture
def alice_and_bob(register, create_listing):
    """Alice owns a listing, Bob is a second user."""

    async def _setup():
        alice, alice_token = await register(email="alice@example.com", full_name="Alice Doe", phone="+91 9800000001")
        bob, bob_token = await register(email="bob@example.com", full_name="Bob Roe", phone="+91 9800000002")
        listing = await create_listing(alice_token)
        return alice, alice_token, bob, bob_token, listing

    return _setup


async def request_swap(client, token, listing_id, **fields):
    payload = SwapCreateFactory.build(listing_id=listing_id, offer_type="item").model_dump()
    payload.update(fields)
    return await client.post("/api/swaps", json=payload, headers=auth_header(token))


async def test_swap_completion_scenario(client, alice_and_bob, stores):
    alice, alice_token, bob, bob_token, listing = await alice_and_bob()
    alice_points = stores.users.rows[alice["id"]]["points"]
    bob_points = stores.users.rows[bob["id"]]["points"]
    assert alice_points == 20

    response = await request_swap(client, bob_token, listing["id"])
    assert response.status_code == 201
    assert response.json()["message"] == "Swap request created successfully"
    swap = response.json()["data"]["swap"]
    assert swap["status"] == "pending"
    assert swap["owner_id"] == alice["id"]
    assert swap["requester_id"] == bob["id"]

    response = await client.put(
        f"/api/swaps/{swap['id']}/status", json={"status": "completed"}, headers=auth_header(bob_token)
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Swap status updated successfully"
    assert response.json()["data"]["swap"]["status"] == "completed"
    assert stores.users.rows[alice["id"]]["points"] == alice_points + 50
    assert stores.users.rows[bob["id"]]["points"] == bob_points + 50


async def test_self_swap_is_rejected(client, alice_and_bob, stores):
    _, alice_token, _, _, listing = await alice_and_bob()

    response = await request_swap(client, alice_token, listing["id"])

    assert response.status_code == 400
    assert response.json()["code"] == "self_swap"
    assert response.json()["message"] == "You cannot request a swap for your own listing"
    assert stores.swaps.rows == {}


async def test_swap_on_missing_listing(client, register):
    _, token = await register()

    response = await request_swap(client, token, "00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404
    assert response.json()["message"] == "Listing not found"


async def test_swap_requires_auth(client):
    response = await client.get("/api/swaps")

    assert response.status_code == 401


async def test_swap_validation(client, alice_and_bob):
    _, _, _, bob_token, listing = await alice_and_bob()

    response = await request_swap(client, bob_token, listing["id"], offer_type="barter", offer_details="   ")

    assert response.status_code == 400
    fields = {error.split(":")[0] for error in response.json()["errors"]}
    assert fields == {"offer_type", "offer_details"}


async def test_both_participants_see_swap_in_list(client, alice_and_bob, register):
    _, alice_token, _, bob_token, listing = await alice_and_bob()
    _, carol_token = await register(email="carol@example.com", full_name="Carol Poe")
    swap = (await request_swap(client, bob_token, listing["id"])).json()["data"]["swap"]

    for token in (alice_token, bob_token):
        response = await client.get("/api/swaps", headers=auth_header(token))
        swaps = response.json()["data"]["swaps"]
        assert [s["id"] for s in swaps] == [swap["id"]]
        assert swaps[0]["listing"]["title"] == listing["title"]
        assert swaps[0]["requester"]["full_name"] == "Bob Roe"
        assert swaps[0]["owner"]["full_name"] == "Alice Doe"

    response = await client.get("/api/swaps", headers=auth_header(carol_token))
    assert response.json()["data"]["swaps"] == []


async def test_swap_detail_for_participants_only(client, alice_and_bob, register):
    _, alice_token, _, bob_token, listing = await alice_and_bob()
    _, carol_token = await register(email="carol@example.com", full_name="Carol Poe")
    swap = (await request_swap(client, bob_token, listing["id"])).json()["data"]["swap"]

    response = await client.get(f"/api/swaps/{swap['id']}", headers=auth_header(alice_token))
    assert response.status_code == 200
    detail = response.json()["data"]["swap"]
    assert detail["requester"]["phone"] == "+91 9800000002"
    assert detail["owner"]["phone"] == "+91 9800000001"
    assert detail["listing"]["description"] == listing["description"]

    response = await client.get(f"/api/swaps/{swap['id']}", headers=auth_header(carol_token))
    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"

    response = await client.get("/api/swaps/00000000-0000-0000-0000-000000000000", headers=auth_header(alice_token))
    assert response.status_code == 404
    assert response.json()["message"] == "Swap not found"


async def test_outsider_cannot_update_status(client, alice_and_bob, register, stores):
    _, _, _, bob_token, listing = await alice_and_bob()
    _, carol_token = await register(email="carol@example.com", full_name="Carol Poe")
    swap = (await request_swap(client, bob_token, listing["id"])).json()["data"]["swap"]

    response = await client.put(
        f"/api/swaps/{swap['id']}/status", json={"status": "accepted"}, headers=auth_header(carol_token)
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Swap not found or you do not have permission to update it"
    assert stores.swaps.rows[swap["id"]]["status"] == "pending"


async def test_status_must_be_settable(client, alice_and_bob):
    _, alice_token, _, bob_token, listing = await alice_and_bob()
    swap = (await request_swap(client, bob_token, listing["id"])).json()["data"]["swap"]

    response = await client.put(
        f"/api/swaps/{swap['id']}/status", json={"status": "pending"}, headers=auth_header(alice_token)
    )

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


async def test_owner_accepts_then_completes(client, alice_and_bob, stores):
    alice, alice_token, bob, bob_token, listing = await alice_and_bob()
    swap = (await request_swap(client, bob_token, listing["id"])).json()["data"]["swap"]

    accepted = await client.put(
        f"/api/swaps/{swap['id']}/status", json={"status": "accepted"}, headers=auth_header(alice_token)
    )
    assert accepted.json()["data"]["swap"]["status"] == "accepted"
    # Only completion awards points
    assert stores.users.rows[bob["id"]]["points"] == 0

    await client.put(f"/api/swaps/{swap['id']}/status", json={"status": "completed"}, headers=auth_header(alice_token))

    assert stores.users.rows[alice["id"]]["points"] == 70
    assert stores.users.rows[bob["id"]]["points"] == 50


async def test_transitions_are_not_restricted(client, alice_and_bob, stores):
    _, alice_token, _, bob_token, listing = await alice_and_bob()
    swap = (await request_swap(client, bob_token, listing["id"])).json()["data"]["swap"]

    await client.put(f"/api/swaps/{swap['id']}/status", json={"status": "rejected"}, headers=auth_header(alice_token))
    response = await client.put(
        f"/api/swaps/{swap['id']}/status", json={"status": "accepted"}, headers=auth_header(bob_token)
    )

    assert response.status_code == 200
    assert stores.swaps.rows[swap["id"]]["status"] == "accepted"
