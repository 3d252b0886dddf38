"""Tests for the entity store."""

import pytest
from sqlalchemy import inspect

from archrepo_api.models import Organization, Project, User
from archrepo_api.services import (
    ConflictError,
    EntityStore,
    NotFoundError,
    ValidationError,
)


@pytest.mark.asyncio
async def test_insert_assigns_id_and_timestamps(store: EntityStore):
    async with store.transaction():
        organization = await store.insert(Organization(name="Acme"))

    assert organization.id is not None
    assert organization.created_at is not None
    assert organization.updated_at is not None


@pytest.mark.asyncio
async def test_get_missing(store: EntityStore):
    assert await store.get(Organization, 9999) is None
    with pytest.raises(NotFoundError) as exc_info:
        await store.get_by_id(Organization, 9999)

    assert exc_info.value.to_dict() == {
        "detail": "Organization with id 9999 not found",
        "rule": "not-found",
        "entity": "Organization",
        "id": 9999,
    }


@pytest.mark.asyncio
async def test_update_whitelisted_fields(store: EntityStore, graph):
    org_id = await graph.organization()

    async with store.transaction():
        organization = await store.update(
            Organization, org_id, name="Acme Corp", description="Renamed"
        )

    assert organization.name == "Acme Corp"
    assert organization.description == "Renamed"


@pytest.mark.asyncio
async def test_update_immutable_field_rejected(store: EntityStore, graph):
    org_id = await graph.organization()
    user_id = await graph.user(org_id)

    with pytest.raises(ValidationError) as exc_info:
        await store.update(User, user_id, id=42, created_at=None)

    assert exc_info.value.rule == "immutable-field"
    assert exc_info.value.context["fields"] == ["created_at", "id"]


@pytest.mark.asyncio
async def test_duplicate_email_conflict(store: EntityStore, graph):
    await graph.user()

    with pytest.raises(ConflictError) as exc_info:
        async with store.transaction():
            await store.insert(User(email="user1@example.com", name="Copy"))

    assert exc_info.value.rule == "integrity"
    assert await store.count(User) == 1


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(store: EntityStore):
    with pytest.raises(RuntimeError):
        async with store.transaction():
            await store.insert(Organization(name="Acme"))
            raise RuntimeError("boom")

    assert await store.count(Organization) == 0


@pytest.mark.asyncio
async def test_nested_transaction_joins_outer(store: EntityStore):
    with pytest.raises(RuntimeError):
        async with store.transaction():
            async with store.transaction():
                await store.insert(Organization(name="Inner"))
            # The inner block did not commit on its own
            await store.insert(Organization(name="Outer"))
            raise RuntimeError("boom")

    assert await store.count(Organization) == 0


@pytest.mark.asyncio
async def test_delete_absent_id_is_noop(store: EntityStore, graph):
    org_id = await graph.organization()

    async with store.transaction():
        await store.delete(Organization, 9999)
        await store.delete(Organization, org_id)
        await store.delete(Organization, org_id)

    assert await store.count(Organization) == 0


@pytest.mark.asyncio
async def test_list_where_ordering_and_limit(store: EntityStore, graph):
    for name in ["b", "a", "c"]:
        await graph.organization(name)

    by_id = await store.list_where(Organization)
    by_name = await store.list_where(
        Organization, order_by=[Organization.name], limit=2
    )

    assert [o.name for o in by_id] == ["b", "a", "c"]
    assert [o.name for o in by_name] == ["a", "b"]
    assert await store.count(Organization, Organization.name != "a") == 2


@pytest.mark.asyncio
async def test_list_where_for_update(store: EntityStore, graph):
    org_id = await graph.organization()

    async with store.transaction():
        locked = await store.list_where(
            Organization, Organization.id == org_id, for_update=True
        )

    assert [o.id for o in locked] == [org_id]


@pytest.mark.parametrize("model", [Organization, Project, User])
def test_models_have_no_orm_relationships(model):
    # Dependent rows are removed by cascade plans, never by lazy ORM loads
    assert not inspect(model).relationships
