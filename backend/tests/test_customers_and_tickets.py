"""
HTTP tests for the /clientes, /chamados and /relatorios endpoints,
including the legacy script URLs.
"""

from datetime import datetime

import pytest

from backend.app.models.billing_enums import TicketStatus
from backend.app.models.support_ticket import SupportTicket

API = "/api/v1"


@pytest.fixture
def make_ticket(db_session):
    async def _make(**overrides) -> SupportTicket:
        values = {
            "customer_login": "maria",
            "subject": "Sem conexao",
            "status": TicketStatus.OPEN.value,
            "opened_at": datetime(2026, 10, 1, 9, 0, 0),
        }
        values.update(overrides)
        ticket = SupportTicket(**values)
        db_session.add(ticket)
        await db_session.commit()
        return ticket

    return _make


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_customers_filters(client, auth_headers, make_customer):
    await make_customer(code="001", login="a", group_name="Centro", active="s")
    await make_customer(code="002", login="b", group_name="Centro", active="n")
    await make_customer(code="003", login="c", group_name="Norte", active="s")

    response = await client.get(f"{API}/clientes", params={"grupo": "Centro", "ativo": "1"}, headers=auth_headers)

    data = response.json()["data"]
    assert [c["codigo"] for c in data["clientes"]] == ["001"]
    assert data["pagination"]["total"] == 1

    response = await client.get(f"{API}/clientes", headers=auth_headers)
    assert [c["codigo"] for c in response.json()["data"]["clientes"]] == ["003", "002", "001"]


@pytest.mark.asyncio
async def test_find_customer_by_code(client, auth_headers, make_customer):
    await make_customer(code="123", name="Joana", city="Campinas")

    response = await client.get(f"{API}/clientes/123", headers=auth_headers)

    assert response.status_code == 200
    cliente = response.json()["data"]["cliente"]
    assert cliente["codigo"] == "123"
    assert cliente["nome"] == "Joana"
    assert cliente["cidade"] == "Campinas"


@pytest.mark.asyncio
async def test_find_route_is_not_shadowed_by_code_route(client, auth_headers, make_customer):
    await make_customer(code="777")

    response = await client.get(f"{API}/clientes/buscar", params={"codigo": "777"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["cliente"]["codigo"] == "777"


@pytest.mark.asyncio
async def test_find_customer_requires_code(client, auth_headers):
    response = await client.get(f"{API}/clientes/buscar", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["data"]["message"] == 'Parameter "codigo" is required'


@pytest.mark.asyncio
async def test_find_unknown_customer(client, auth_headers):
    response = await client.get(f"{API}/clientes/999", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_customer(client, auth_headers):
    response = await client.post(
        f"{API}/clientes",
        json={"codigo": "500", "nome": "<b>Carlos</b>", "grupo": "Sul", "ativo": True},
        headers=auth_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["message"] == "Customer created successfully"
    assert isinstance(body["data"]["cliente_id"], int)

    cliente = (await client.get(f"{API}/clientes/500", headers=auth_headers)).json()["data"]["cliente"]
    assert cliente["nome"] == "Carlos"
    assert cliente["grupo"] == "Sul"
    assert cliente["cli_ativado"] == "s"
    assert cliente["data_ins"] is not None


@pytest.mark.asyncio
async def test_create_duplicate_customer_is_409(client, auth_headers, make_customer):
    await make_customer(code="42")

    response = await client.post(f"{API}/clientes", json={"codigo": "42", "nome": "Outro"}, headers=auth_headers)

    assert response.status_code == 409
    assert response.json()["data"] == {
        "error": "Conflict",
        "message": "A customer with this code already exists",
    }


@pytest.mark.asyncio
async def test_create_customer_missing_fields(client, auth_headers):
    response = await client.post(f"{API}/clientes", json={"nome": "Sem codigo"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["data"]["message"] == "Missing required parameters: codigo"


# ---------------------------------------------------------------------------
# Tickets
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_open_tickets_count_only_active_customers(client, auth_headers, make_customer, make_ticket):
    await make_customer(login="ativo", active="s")
    await make_customer(login="inativo", active="n")
    await make_ticket(customer_login="ativo")
    await make_ticket(customer_login="ativo")
    await make_ticket(customer_login="inativo")
    await make_ticket(customer_login="ativo", status=TicketStatus.CLOSED.value)

    response = await client.get(f"{API}/chamados/abertos", headers=auth_headers)

    assert response.json()["data"] == {"chamados_abertos": 2}


@pytest.mark.asyncio
async def test_closed_tickets_in_month(client, auth_headers, make_customer, make_ticket):
    await make_customer(login="x", group_name="Centro")
    await make_customer(login="y", group_name="Norte")
    closed = TicketStatus.CLOSED.value
    await make_ticket(customer_login="x", status=closed, closed_at=datetime(2026, 9, 15, 10, 0))
    await make_ticket(customer_login="y", status=closed, closed_at=datetime(2026, 9, 20, 10, 0))
    await make_ticket(customer_login="x", status=closed, closed_at=datetime(2026, 8, 1, 10, 0))

    response = await client.get(f"{API}/chamados/fechados", params={"data": "2026-09"}, headers=auth_headers)
    assert response.json()["data"] == {"chamados_fechados": 2, "periodo": "2026-09", "grupo": None}

    response = await client.get(
        f"{API}/chamados/fechados", params={"data": "2026-09", "grupo": "Centro"}, headers=auth_headers
    )
    assert response.json()["data"]["chamados_fechados"] == 1


@pytest.mark.asyncio
async def test_closed_tickets_on_day(client, auth_headers, make_customer, make_ticket):
    await make_customer(login="x", active="s")
    closed = TicketStatus.CLOSED.value
    await make_ticket(customer_login="x", status=closed, closed_at=datetime(2026, 10, 5, 8, 30))
    await make_ticket(customer_login="x", status=closed, closed_at=datetime(2026, 10, 6, 8, 30))

    response = await client.get(
        f"{API}/chamados/fechados/dia", params={"dia": "05", "mes": "10", "ano": "2026"}, headers=auth_headers
    )

    assert response.json()["data"] == {"chamados_fechados_dia": 1, "data": "05/10/2026"}


@pytest.mark.asyncio
async def test_group_report(client, auth_headers, make_customer, make_ticket):
    await make_customer(login="x", group_name="Centro", installed_at=datetime(2026, 9, 3))
    await make_customer(login="y", group_name="Centro", deactivated_at=datetime(2026, 9, 10))
    await make_customer(login="z", group_name="Norte", installed_at=datetime(2025, 1, 1))
    await make_ticket(customer_login="x", status=TicketStatus.CLOSED.value, closed_at=datetime(2026, 9, 4, 12, 0))

    response = await client.get(f"{API}/relatorios/grupos", params={"data": "2026-09"}, headers=auth_headers)

    data = response.json()["data"]
    assert data["periodo"] == "2026-09"
    assert data["relatorio_por_grupo"] == [
        {"grupo": "Centro", "chamados_fechados": 1, "instalacoes": 1, "desativacoes": 1},
        {"grupo": "Norte", "chamados_fechados": 0, "instalacoes": 0, "desativacoes": 0},
    ]


# ---------------------------------------------------------------------------
# Legacy script URLs
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_legacy_customer_lookup(client, auth_headers, make_customer):
    await make_customer(code="900")

    response = await client.get("/buscacliente.php", params={"codigo": "900"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["cliente"]["codigo"] == "900"


@pytest.mark.asyncio
async def test_legacy_open_tickets_accepts_query_key(client, make_customer, make_ticket):
    await make_customer(login="x", active="s")
    await make_ticket(customer_login="x")

    response = await client.get("/chamadoaberto.php", params={"api": "test-api-key"})

    assert response.json()["data"] == {"chamados_abertos": 1}
