import json

import httpx
import pytest

from learnix.clients.identity import IdentityProviderClient
from learnix.core.exceptions import IdentityProviderError
from learnix.schemas.user import ExternalIdentity

PROFILE = {
    "id": "user_ext_1",
    "email_addresses": [{"email_address": "ada@example.com"}],
    "first_name": "Ada",
    "last_name": None,
    "image_url": "https://img.example.com/ada.png",
    "public_metadata": {"role": "admin"},
}


def make_client(handler) -> IdentityProviderClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://identity.test/v1")
    return IdentityProviderClient(client_provider=lambda: http_client)


@pytest.mark.anyio
async def test_get_user_parses_profile():
    client = make_client(lambda request: httpx.Response(200, json=PROFILE))

    identity = await client.get_user("user_ext_1")

    assert identity.primary_email == "ada@example.com"
    assert identity.display_name == "Ada"
    assert identity.public_metadata == {"role": "admin"}


@pytest.mark.anyio
async def test_unknown_user_is_none_and_outage_raises():
    assert await make_client(lambda request: httpx.Response(404)).get_user("nobody") is None
    with pytest.raises(IdentityProviderError):
        await make_client(lambda request: httpx.Response(503)).get_user("user_ext_1")


@pytest.mark.anyio
@pytest.mark.parametrize("payload", [[PROFILE], {"data": [PROFILE], "total_count": 1}])
async def test_list_users_accepts_both_page_shapes(payload):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=payload)

    identities = await make_client(handler).list_users(limit=25)

    assert [identity.id for identity in identities] == ["user_ext_1"]
    assert seen["params"] == {"limit": "25", "order_by": "-created_at"}


@pytest.mark.anyio
async def test_metadata_update_sends_public_metadata():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=PROFILE)

    await make_client(handler).update_user_metadata("user_ext_1", {"role": "mentor"})

    assert seen == {
        "method": "PATCH",
        "path": "/v1/users/user_ext_1/metadata",
        "body": {"public_metadata": {"role": "mentor"}},
    }


def test_display_name_falls_back_to_email_local_part():
    identity = ExternalIdentity(id="x", email_addresses=[{"email_address": "grace@example.com"}])
    assert identity.display_name == "grace"


@pytest.mark.anyio
async def test_profile_that_is_not_json_is_a_provider_error():
    client = make_client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
    with pytest.raises(IdentityProviderError):
        await client.get_user("user_ext_1")


@pytest.mark.anyio
@pytest.mark.parametrize("email", ["dev@box.local", "not-an-email"])
async def test_profile_with_rejected_email_is_a_provider_error(email):
    profile = {**PROFILE, "email_addresses": [{"email_address": email}]}
    with pytest.raises(IdentityProviderError):
        await make_client(lambda request: httpx.Response(200, json=profile)).get_user("user_ext_1")


@pytest.mark.anyio
async def test_listing_skips_malformed_users():
    broken = {**PROFILE, "id": "user_ext_2", "email_addresses": [{"email_address": "not-an-email"}]}
    payload = {"data": [broken, "garbage", PROFILE]}

    identities = await make_client(lambda request: httpx.Response(200, json=payload)).list_users()

    assert [identity.id for identity in identities] == ["user_ext_1"]


@pytest.mark.anyio
@pytest.mark.parametrize(
    "reply",
    [
        httpx.Response(200, text="<html>maintenance</html>"),
        httpx.Response(200, json={"data": "nope"}),
    ],
)
async def test_unreadable_listing_is_a_provider_error(reply):
    with pytest.raises(IdentityProviderError):
        await make_client(lambda request: reply).list_users()
