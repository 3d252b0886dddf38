"""Tests for the HTTP API."""

import pytest
from httpx import AsyncClient

API = "/api/v1"


async def _seed(client: AsyncClient) -> dict[str, int]:
    """Organization, owner and project created through the API."""
    org = await client.post(f"{API}/organizations", json={"name": "Acme"})
    owner = await client.post(
        f"{API}/users",
        json={
            "email": "owner@example.com",
            "name": "Owner",
            "organization_id": org.json()["id"],
        },
    )
    project = await client.post(
        f"{API}/projects",
        json={
            "name": "Payments",
            "organization_id": org.json()["id"],
            "created_by": owner.json()["id"],
        },
    )
    assert project.status_code == 201
    return {
        "org": org.json()["id"],
        "owner": owner.json()["id"],
        "project": project.json()["id"],
    }


async def _component(
    client: AsyncClient, seed: dict[str, int], name: str, **fields
) -> dict:
    payload = {
        "name": name,
        "type": "business_process",
        "layer": "business",
        "project_id": seed["project"],
        "created_by": seed["owner"],
        **fields,
    }
    response = await client.post(f"{API}/components", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_organization(client: AsyncClient):
    response = await client.post(
        f"{API}/organizations", json={"name": "Acme", "description": "HQ"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Acme"
    assert data["description"] == "HQ"
    assert "id" in data


@pytest.mark.asyncio
async def test_get_missing_organization(client: AsyncClient):
    response = await client.get(f"{API}/organizations/9999")

    assert response.status_code == 404
    assert response.json()["rule"] == "not-found"
    assert response.json()["entity"] == "Organization"


@pytest.mark.asyncio
async def test_duplicate_email_conflict(client: AsyncClient):
    payload = {"email": "dup@example.com", "name": "First"}
    assert (await client.post(f"{API}/users", json=payload)).status_code == 201

    response = await client.post(f"{API}/users", json=payload)

    assert response.status_code == 409
    assert response.json()["rule"] == "integrity"


@pytest.mark.asyncio
async def test_invalid_email_rejected(client: AsyncClient):
    response = await client.post(
        f"{API}/users", json={"email": "not-an-email", "name": "Nobody"}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_project_creator_is_owner(client: AsyncClient):
    seed = await _seed(client)

    response = await client.get(f"{API}/projects/{seed['project']}/members")

    assert response.status_code == 200
    members = response.json()
    assert len(members) == 1
    assert members[0]["user_id"] == seed["owner"]
    assert members[0]["role"] == "owner"

    projects = await client.get(f"{API}/users/{seed['owner']}/projects")
    assert [p["id"] for p in projects.json()] == [seed["project"]]


@pytest.mark.asyncio
async def test_update_project_status(client: AsyncClient):
    seed = await _seed(client)

    response = await client.patch(
        f"{API}/projects/{seed['project']}", json={"status": "archived"}
    )

    assert response.status_code == 200
    assert response.json()["status"] == "archived"
    assert response.json()["name"] == "Payments"


@pytest.mark.asyncio
async def test_component_type_layer_mismatch(client: AsyncClient):
    seed = await _seed(client)

    response = await client.post(
        f"{API}/components",
        json={
            "name": "Ledger",
            "type": "service",
            "layer": "business",
            "project_id": seed["project"],
            "created_by": seed["owner"],
        },
    )

    assert response.status_code == 422
    assert response.json()["rule"] == "type-layer-mismatch"


@pytest.mark.asyncio
async def test_component_metadata_round_trip(client: AsyncClient):
    seed = await _seed(client)
    component = await _component(client, seed, "Billing", metadata='{"tier": 1}')
    assert component["metadata"] == '{"tier": 1}'

    response = await client.patch(
        f"{API}/components/{component['id']}",
        json={"metadata": '{"tier": 2}', "name": "Billing v2"},
    )

    assert response.status_code == 200
    assert response.json()["metadata"] == '{"tier": 2}'
    assert response.json()["name"] == "Billing v2"

    cleared = await client.patch(
        f"{API}/components/{component['id']}", json={"metadata": None}
    )
    assert cleared.json()["metadata"] is None


@pytest.mark.asyncio
async def test_list_components_by_layer(client: AsyncClient):
    seed = await _seed(client)
    await _component(client, seed, "Billing")
    await _component(client, seed, "Orders", type="data_entity", layer="data")

    response = await client.get(
        f"{API}/projects/{seed['project']}/components", params={"layer": "data"}
    )

    assert [c["name"] for c in response.json()] == ["Orders"]


@pytest.mark.asyncio
async def test_relationship_rules(client: AsyncClient):
    seed = await _seed(client)
    c1 = await _component(client, seed, "Billing")
    c2 = await _component(client, seed, "Invoicing")

    def payload(source: int, target: int) -> dict:
        return {
            "source_component_id": source,
            "target_component_id": target,
            "relationship_type": "depends_on",
            "created_by": seed["owner"],
        }

    created = await client.post(
        f"{API}/relationships", json=payload(c1["id"], c2["id"])
    )
    assert created.status_code == 201

    self_edge = await client.post(
        f"{API}/relationships", json=payload(c1["id"], c1["id"])
    )
    assert self_edge.status_code == 422
    assert self_edge.json()["rule"] == "self-relationship"

    missing = await client.post(f"{API}/relationships", json=payload(c1["id"], 9999))
    assert missing.status_code == 404

    listed = await client.get(f"{API}/components/{c2['id']}/relationships")
    assert [r["id"] for r in listed.json()] == [created.json()["id"]]

    deleted = await client.delete(f"{API}/relationships/{created.json()['id']}")
    assert deleted.status_code == 204
    gone = await client.get(f"{API}/relationships/{created.json()['id']}")
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_cross_project_relationship_rejected(client: AsyncClient):
    seed = await _seed(client)
    other = await client.post(
        f"{API}/projects",
        json={
            "name": "Other",
            "organization_id": seed["org"],
            "created_by": seed["owner"],
        },
    )
    c1 = await _component(client, seed, "Billing")
    c2 = await _component(
        client, {**seed, "project": other.json()["id"]}, "Elsewhere"
    )

    response = await client.post(
        f"{API}/relationships",
        json={
            "source_component_id": c1["id"],
            "target_component_id": c2["id"],
            "relationship_type": "uses",
            "created_by": seed["owner"],
        },
    )

    assert response.status_code == 422
    assert response.json()["rule"] == "cross-project"


@pytest.mark.asyncio
async def test_member_endpoints(client: AsyncClient):
    seed = await _seed(client)
    editor = await client.post(
        f"{API}/users", json={"email": "editor@example.com", "name": "Editor"}
    )
    editor_id = editor.json()["id"]
    members = f"{API}/projects/{seed['project']}/members"

    added = await client.post(
        members,
        json={"user_id": editor_id, "role": "editor", "added_by": seed["owner"]},
    )
    assert added.status_code == 201

    duplicate = await client.post(
        members,
        json={"user_id": editor_id, "role": "viewer", "added_by": seed["owner"]},
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["rule"] == "duplicate-member"

    last_owner = await client.delete(f"{members}/{seed['owner']}")
    assert last_owner.status_code == 409
    assert last_owner.json()["rule"] == "last-owner"

    promoted = await client.patch(f"{members}/{editor_id}", json={"role": "owner"})
    assert promoted.json()["role"] == "owner"

    removed = await client.delete(f"{members}/{seed['owner']}")
    assert removed.status_code == 204

    not_member = await client.delete(f"{members}/{seed['owner']}")
    assert not_member.status_code == 409
    assert not_member.json()["rule"] == "not-a-member"


@pytest.mark.asyncio
async def test_delete_user_blocked(client: AsyncClient):
    seed = await _seed(client)

    response = await client.delete(f"{API}/users/{seed['owner']}")

    assert response.status_code == 409
    data = response.json()
    assert data["rule"] == "dependency-blocked"
    assert data["category"] == "projects"
    assert data["count"] == 1


@pytest.mark.asyncio
async def test_delete_user(client: AsyncClient):
    user = await client.post(
        f"{API}/users", json={"email": "temp@example.com", "name": "Temp"}
    )

    response = await client.delete(f"{API}/users/{user.json()['id']}")

    assert response.status_code == 204
    missing = await client.delete(f"{API}/users/{user.json()['id']}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_artifact_lifecycle(client: AsyncClient, artifact_storage):
    seed = await _seed(client)
    component = await _component(client, seed, "Billing")

    negative = await client.post(
        f"{API}/artifacts",
        json={
            "name": "context.png",
            "file_path": "uploads/context.png",
            "file_type": "image/png",
            "file_size": -1,
            "project_id": seed["project"],
            "uploaded_by": seed["owner"],
        },
    )
    assert negative.status_code == 422

    created = await client.post(
        f"{API}/artifacts",
        json={
            "name": "context.png",
            "file_path": "uploads/context.png",
            "file_type": "image/png",
            "file_size": 2048,
            "component_id": component["id"],
            "project_id": seed["project"],
            "uploaded_by": seed["owner"],
        },
    )
    assert created.status_code == 201

    listed = await client.get(f"{API}/components/{component['id']}/artifacts")
    assert [a["id"] for a in listed.json()] == [created.json()["id"]]

    deleted = await client.delete(f"{API}/artifacts/{created.json()['id']}")
    assert deleted.status_code == 204
    assert artifact_storage.removed == ["uploads/context.png"]

    missing = await client.delete(f"{API}/artifacts/{created.json()['id']}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_delete_project_cascades(client: AsyncClient, artifact_storage):
    seed = await _seed(client)
    component = await _component(client, seed, "Billing")
    await client.post(
        f"{API}/artifacts",
        json={
            "name": "context.png",
            "file_path": "uploads/context.png",
            "file_type": "image/png",
            "file_size": 10,
            "component_id": component["id"],
            "project_id": seed["project"],
            "uploaded_by": seed["owner"],
        },
    )

    response = await client.delete(f"{API}/projects/{seed['project']}")

    assert response.status_code == 204
    assert (await client.get(f"{API}/projects/{seed['project']}")).status_code == 404
    assert (
        await client.get(f"{API}/components/{component['id']}")
    ).status_code == 404
    assert artifact_storage.removed == ["uploads/context.png"]

    # Deleting again is a no-op
    again = await client.delete(f"{API}/projects/{seed['project']}")
    assert again.status_code == 204


@pytest.mark.asyncio
async def test_reports_and_dashboard(client: AsyncClient):
    seed = await _seed(client)
    c1 = await _component(client, seed, "Billing")
    c2 = await _component(client, seed, "Ledger", type="service", layer="application")
    await client.post(
        f"{API}/relationships",
        json={
            "source_component_id": c1["id"],
            "target_component_id": c2["id"],
            "relationship_type": "supports",
            "created_by": seed["owner"],
        },
    )
    base = f"{API}/projects/{seed['project']}"

    components = (await client.get(f"{base}/reports/components")).json()
    assert components["summary"] == {
        "total": 2,
        "by_layer": {"business": 1, "application": 1},
        "by_type": {"business_process": 1, "service": 1},
    }

    relationships = (await client.get(f"{base}/reports/relationships")).json()
    assert relationships["summary"] == {"total": 1, "by_type": {"supports": 1}}

    dashboard = (await client.get(f"{base}/dashboard")).json()
    assert dashboard["total_components"] == 2
    assert dashboard["total_relationships"] == 1
    assert dashboard["total_artifacts"] == 0
    assert dashboard["components_by_layer"]["technology"] == 0
    assert {item["entity_id"] for item in dashboard["recent_activity"]} == {
        c1["id"],
        c2["id"],
    }


@pytest.mark.asyncio
async def test_reports_for_unknown_project_are_empty(client: AsyncClient):
    response = await client.get(f"{API}/projects/9999/dashboard")

    assert response.status_code == 200
    assert response.json()["total_components"] == 0
    assert response.json()["recent_activity"] == []


@pytest.mark.asyncio
async def test_delete_organization_cascades(client: AsyncClient):
    seed = await _seed(client)
    await _component(client, seed, "Billing")

    response = await client.delete(f"{API}/organizations/{seed['org']}")

    assert response.status_code == 204
    assert (await client.get(f"{API}/organizations")).json() == []
    assert (await client.get(f"{API}/users")).json() == []
    assert (await client.get(f"{API}/projects")).json() == []
