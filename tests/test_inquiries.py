import pytest

from maeson_realty.errors import NotAuthenticatedError, NotFoundError
from maeson_realty.schemas.inquiry import InquiryCreateRequest
from maeson_realty.services.inquiries import (
    create_inquiry,
    delete_inquiry,
    list_received_inquiries,
    list_sent_inquiries,
    update_inquiry_status,
)


@pytest.fixture
def agent(store):
    return store.add_user(email="agent@example.com", first_name="Chidi", role="agent")


@pytest.fixture
def buyer(store):
    return store.add_user(email="buyer@example.com", first_name="Ada")


@pytest.mark.asyncio
async def test_inquiry_goes_to_listing_agent(store, backend, agent, buyer):
    agent_id, agent_token = agent
    buyer_id, buyer_token = buyer
    prop = store.add_property(agent_id=agent_id)

    inquiry = await create_inquiry(
        backend.with_token(buyer_token),
        InquiryCreateRequest(property_id=prop["id"], message="Is it still available?"),
    )

    assert inquiry.recipient.id == agent_id
    assert inquiry.sender.id == buyer_id
    assert inquiry.status == "new"
    assert inquiry.inquiry_type == "general"
    assert inquiry.preferred_contact_method == "email"

    received = await list_received_inquiries(backend.with_token(agent_token))
    assert [i.id for i in received] == [inquiry.id]
    assert received[0].sender.first_name == "Ada"

    sent = await list_sent_inquiries(backend.with_token(buyer_token))
    assert sent[0].recipient.first_name == "Chidi"
    assert await list_sent_inquiries(backend.with_token(agent_token)) == []


@pytest.mark.asyncio
async def test_inquiry_for_missing_property(store, backend, buyer):
    _, token = buyer
    with pytest.raises(NotFoundError):
        await create_inquiry(
            backend.with_token(token),
            InquiryCreateRequest(property_id="missing", message="Hello"),
        )
    assert ("table", "inquiries", "insert") not in store.calls


@pytest.mark.asyncio
async def test_inquiry_requires_session(store, backend):
    with pytest.raises(NotAuthenticatedError):
        await create_inquiry(backend, InquiryCreateRequest(property_id="p1", message="Hello"))
    assert store.calls == []


@pytest.mark.asyncio
async def test_response_stamps_responded_at(store, backend, agent, buyer):
    agent_id, agent_token = agent
    _, buyer_token = buyer
    prop = store.add_property(agent_id=agent_id)
    inquiry = await create_inquiry(
        backend.with_token(buyer_token),
        InquiryCreateRequest(property_id=prop["id"], message="Can I visit?"),
    )
    client = backend.with_token(agent_token)

    read = await update_inquiry_status(client, inquiry.id, "read")
    assert read.status == "read"
    assert read.responded_at is None

    answered = await update_inquiry_status(client, inquiry.id, "responded", "Saturday works")
    assert answered.response == "Saturday works"
    assert answered.responded_at is not None
    assert answered.sender.first_name == "Ada"


@pytest.mark.asyncio
async def test_update_missing_inquiry(backend, agent):
    _, token = agent
    with pytest.raises(NotFoundError):
        await update_inquiry_status(backend.with_token(token), "missing", "read")


@pytest.mark.asyncio
async def test_delete_inquiry(store, backend, agent, buyer):
    agent_id, _ = agent
    _, buyer_token = buyer
    client = backend.with_token(buyer_token)
    prop = store.add_property(agent_id=agent_id)
    inquiry = await create_inquiry(client, InquiryCreateRequest(property_id=prop["id"], message="Hi"))

    await delete_inquiry(client, inquiry.id)

    assert await list_sent_inquiries(client) == []


@pytest.mark.asyncio
async def test_inquiry_endpoints(client, store, agent, buyer):
    agent_id, agent_token = agent
    _, buyer_token = buyer
    prop = store.add_property(agent_id=agent_id)

    created = await client.post(
        "/api/v1/inquiries",
        json={"property_id": prop["id"], "message": "Price negotiable?", "inquiry_type": "pricing"},
        headers={"Authorization": f"Bearer {buyer_token}"},
    )
    assert created.status_code == 201
    assert created.json()["inquiry_type"] == "pricing"

    received = await client.get(
        "/api/v1/inquiries/received",
        headers={"Authorization": f"Bearer {agent_token}"},
    )
    assert len(received.json()) == 1

    missing = await client.post(
        "/api/v1/inquiries",
        json={"property_id": "missing", "message": "Hello"},
        headers={"Authorization": f"Bearer {buyer_token}"},
    )
    assert missing.status_code == 404
