"""
Unit Tests for Response Normalization
=====================================

Tests for gateway/app/proxy/normalizer.py
"""

import pytest
from pydantic import ValidationError

from gateway.app.models import ClientResponse, TransportFailure, UpstreamResponse
from gateway.app.proxy.normalizer import extract_message, normalize

DEFAULT = "Falha ao criar loja"


def test_transport_failure_maps_to_generic_500():
    response = normalize(TransportFailure(reason="ConnectError('refused')"), DEFAULT)

    assert response.status_code == 500
    assert response.body == {"message": "Erro interno no servidor"}


def test_transport_failure_detail_not_exposed():
    response = normalize(TransportFailure(reason="secret-host:5432 refused"), DEFAULT)

    assert "secret-host" not in str(response.body)


@pytest.mark.parametrize("status_code", [200, 201, 202, 299])
@pytest.mark.parametrize("body", [
    {"id": 1, "nested": {"a": [1, 2]}},
    [{"id": 1}, {"id": 2}],
    "plain",
    None,
])
def test_success_is_pass_through(status_code, body):
    response = normalize(UpstreamResponse(status_code=status_code, body=body), DEFAULT)

    assert response.status_code == status_code
    assert response.body == body


@pytest.mark.parametrize("status_code", [199, 300, 400, 404, 422, 500, 503])
def test_error_status_is_mirrored(status_code):
    response = normalize(UpstreamResponse(status_code=status_code, body={"message": "x"}), DEFAULT)

    assert response.status_code == status_code
    assert response.body == {"message": "x"}


def test_error_body_extra_fields_are_dropped():
    upstream = UpstreamResponse(status_code=400, body={"message": "Slug inválido", "statusCode": 400, "error": "Bad Request"})

    assert normalize(upstream, DEFAULT).body == {"message": "Slug inválido"}


@pytest.mark.parametrize("body", [
    {},
    {"error": "Bad Request"},
    {"message": ""},
    {"message": None},
    {"message": 42},
    [],
    "not an object",
    None,
])
def test_error_without_usable_message_uses_default(body):
    response = normalize(UpstreamResponse(status_code=400, body=body), DEFAULT)

    assert response.body == {"message": DEFAULT}


def test_message_list_is_joined():
    assert extract_message({"message": ["a", "", "b", 3]}, DEFAULT) == "a; b"


def test_empty_message_list_uses_default():
    assert extract_message({"message": []}, DEFAULT) == DEFAULT


def test_normalize_is_deterministic():
    upstream = UpstreamResponse(status_code=403, body={"statusCode": 403})

    assert normalize(upstream, DEFAULT) == normalize(upstream, DEFAULT)


class TestClientResponseEnvelope:
    def test_error_without_message_rejected(self):
        with pytest.raises(ValidationError):
            ClientResponse(status_code=500, body={"detail": "x"})

    def test_error_with_non_string_message_rejected(self):
        with pytest.raises(ValidationError):
            ClientResponse(status_code=404, body={"message": ["x"]})

    def test_success_body_unconstrained(self):
        assert ClientResponse(status_code=200, body=[1, 2]).body == [1, 2]
