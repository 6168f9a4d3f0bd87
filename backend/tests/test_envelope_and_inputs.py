"""
Tests for the response envelope, request context and input helpers.
"""

import json
import re
from decimal import Decimal

import pytest
from pydantic import ValidationError

from backend.app.core.context import RequestContext
from backend.app.core.envelope import Reply, ResponseEnvelope, build_envelope, render
from backend.app.core.exceptions import InvoiceStateConflict, MissingFieldsError, NotFoundError
from backend.app.core.inputs import is_blank, page_window, parse_amount, require_fields, sanitize_text
from backend.app.schemas.customer import CustomerCreate
from backend.app.schemas.invoice import InvoiceSearchRequest, ReceiveRequest, ReverseRequest


def test_envelope_success_reply():
    response = render(Reply.ok({"x": "ação"}), "America/Sao_Paulo")
    body = json.loads(response.body)

    assert response.status_code == 200
    assert body["success"] is True
    assert body["status_code"] == 200
    assert body["data"] == {"x": "ação"}
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", body["timestamp"])
    # Non-ASCII text is emitted as-is
    assert "ação".encode("utf-8") in response.body


def test_envelope_error_reply():
    response = render(Reply.failure(NotFoundError("Invoice not found")), "UTC")
    body = json.loads(response.body)

    assert response.status_code == 404
    assert body["success"] is False
    assert body["data"] == {"error": "Not Found", "message": "Invoice not found"}


def test_blank_reply_has_no_body():
    response = render(Reply.blank(), "UTC", headers={"Access-Control-Allow-Origin": "*"})
    assert response.status_code == 200
    assert response.body == b""
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_envelope_rejects_inconsistent_success_flag():
    with pytest.raises(ValidationError):
        ResponseEnvelope(success=True, status_code=500, timestamp="2026-01-01 00:00:00")


def test_build_envelope_marks_2xx_as_success():
    assert build_envelope(Reply.ok({}, status_code=201), "UTC").success is True
    assert build_envelope(Reply(status_code=302), "UTC").success is False


def test_state_conflict_is_a_bad_request():
    error = InvoiceStateConflict("Invoice already paid or not found")
    assert error.status_code == 400
    assert error.to_payload()["error"] == "Bad Request"


def test_request_context_json_body():
    assert RequestContext.build("PUT", "/", body=b'{"valor": 1}').json_body() == {"valor": 1}
    assert RequestContext.build("PUT", "/", body=b"not json").json_body() is None
    assert RequestContext.build("PUT", "/", body=b"[1, 2]").json_body() is None
    assert RequestContext.build("PUT", "/").json_body() is None


def test_request_context_is_immutable():
    context = RequestContext.build("get", "/x", headers={"X-Api-Key": "k"})
    assert context.method == "GET"
    assert context.header("x-api-key") == "k"
    with pytest.raises(TypeError):
        context.headers["x-api-key"] = "other"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("100", Decimal("100.00")),
        (100, Decimal("100.00")),
        (99.9, Decimal("99.90")),
        ("12.5abc", Decimal("12.50")),
        ("  7.125", Decimal("7.12")),
        ("12,50", Decimal("12.00")),
        ("abc", Decimal("0.00")),
        ("", Decimal("0.00")),
        (None, Decimal("0.00")),
        (True, Decimal("1.00")),
        ([1, 2], Decimal("0.00")),
        ("1e2", Decimal("100.00")),
    ],
)
def test_parse_amount_is_permissive(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("value", [None, "", "0", 0, 0.0, False, [], {}])
def test_blank_values(value):
    assert is_blank(value)


@pytest.mark.parametrize("value", ["a", "0.0", 1, -1, True, [0], {"a": 1}, " "])
def test_present_values(value):
    assert not is_blank(value)


def test_require_fields_lists_missing_in_order():
    error = require_fields({"valor": "0", "forma": ""}, ("valor", "forma"))
    assert isinstance(error, MissingFieldsError)
    assert error.fields == ["valor", "forma"]
    assert "valor, forma" in error.message

    assert require_fields({"valor": "10", "forma": "pix"}, ("valor", "forma")) is None


def test_sanitize_text():
    assert sanitize_text("  <b>Jo&atilde;o</b> ") == "Jo&amp;atilde;o"
    assert sanitize_text('say "hi"') == "say &quot;hi&quot;"
    assert sanitize_text(None) == ""


@pytest.mark.parametrize(
    "page, limit, expected",
    [
        (None, None, (1, 20, 0)),
        ("3", "10", (3, 10, 20)),
        ("0", "500", (1, 100, 0)),
        ("-2", "0", (1, 1, 0)),
        ("abc", "x", (1, 1, 0)),
    ],
)
def test_page_window(page, limit, expected):
    assert page_window(page, limit, default_limit=20) == expected


def test_receive_request_reads_legacy_field_names():
    request = ReceiveRequest.model_validate({"valor": "12.5abc", "forma": " <b>pix</b> ", "coletor": ""})

    assert request.amount == Decimal("12.50")
    assert request.method == "pix"
    assert request.collector == "API"

    request = ReceiveRequest.model_validate({"valor": 30, "forma": "boleto", "coletor": "caixa2"})
    assert request.amount == Decimal("30.00")
    assert request.collector == "caixa2"


def test_reverse_request_defaults_actor():
    assert ReverseRequest.model_validate({}).actor == "API"
    assert ReverseRequest.model_validate({"usuario": None}).actor == "API"
    assert ReverseRequest.model_validate({"usuario": "<i>gerente</i>"}).actor == "gerente"


def test_search_request_ignores_non_list_selectors():
    request = InvoiceSearchRequest.model_validate({"login": "maria", "cpf_cnpj": [123, "456"], "status": "pago"})

    assert request.logins == []
    assert request.tax_ids == ["123", "456"]
    assert request.status == "pago"
    assert InvoiceSearchRequest.model_validate({"status": ""}).is_empty


def test_customer_create_maps_active_flag():
    assert CustomerCreate.model_validate({"codigo": 10, "nome": "Ana"}).active == "n"
    created = CustomerCreate.model_validate({"codigo": 10, "nome": "Ana", "ativo": "1", "grupo": None})
    assert created.code == "10"
    assert created.active == "s"
    assert created.group_name == ""
