from uuid import uuid4

import structlog

from linkfolio.core.observability import bind_link_context


def test_bind_link_context():
    owner_id, link_id = uuid4(), uuid4()
    structlog.contextvars.clear_contextvars()
    try:
        bind_link_context(owner_id)
        assert structlog.contextvars.get_contextvars() == {"owner_id": str(owner_id)}

        bind_link_context(owner_id, link_id)
        assert structlog.contextvars.get_contextvars() == {
            "owner_id": str(owner_id),
            "link_id": str(link_id),
        }
    finally:
        structlog.contextvars.clear_contextvars()


async def test_metrics_count_link_operations_by_route(api_client, alice_headers):
    await api_client.post(
        "/api/v1/links",
        json={"title": "Site", "url": "https://site.example.com"},
        headers=alice_headers,
    )

    body = (await api_client.get("/metrics")).text

    assert 'linkfolio_link_operations_total{operation="create"}' in body
    assert 'route="/api/v1/links"' in body
