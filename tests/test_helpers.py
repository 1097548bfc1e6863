import copy
import logging
from http import HTTPStatus

import httpx
import pytest

from campaign_standard.helpers import (
    UNREADABLE_BODY,
    create_request_options,
    reduce_error,
    request_interceptor,
    response_interceptor,
)


class CapturingLogger:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def debug(self, message, *args, **kwargs) -> None:
        self.messages.append(message)


class FakeResponse:
    def __init__(self, ok: bool, text) -> None:
        self.ok = ok
        self.text = text


@pytest.fixture
def log() -> CapturingLogger:
    return CapturingLogger()


def test_create_request_options_defaults_body_to_empty_mapping():
    options = create_request_options(tenant_id="T", api_key="K", access_token="A")

    assert options == {
        "requestBody": {},
        "securities": {
            "authorized": {
                "BearerAuth": {"value": "A"},
                "ApiKeyAuth": {"value": "K"},
            }
        },
        "serverVariables": {"ORGANIZATION": "T"},
    }


def test_create_request_options_keeps_body_and_passes_empty_credentials_through():
    body = {"x": 1}
    options = create_request_options(tenant_id="", api_key="", access_token="", body=body)

    assert options["requestBody"] is body
    assert options["securities"]["authorized"]["BearerAuth"] == {"value": ""}
    assert options["serverVariables"] == {"ORGANIZATION": ""}


def test_create_request_options_builds_a_fresh_value_each_call():
    first = create_request_options(tenant_id="T", api_key="K", access_token="A")
    second = create_request_options(tenant_id="T", api_key="K", access_token="A")

    assert first == second
    assert first is not second
    assert first["requestBody"] is not second["requestBody"]


def test_request_interceptor_returns_same_object_and_logs_it(log):
    req = {"method": "GET", "url": "/profileAndServices/profile", "headers": {"a": "b"}}
    snapshot = copy.deepcopy(req)

    result = request_interceptor(req, log=log)

    assert result is req
    assert req == snapshot
    assert len(log.messages) == 1
    assert log.messages[0].startswith("REQUEST:\n ")
    assert '"url": "/profileAndServices/profile"' in log.messages[0]


def test_request_interceptor_survives_unserializable_input(log):
    req: dict = {"name": "loop"}
    req["self"] = req

    assert request_interceptor(req, log=log) is req
    assert log.messages[0].startswith("REQUEST:")


def test_request_interceptor_redacts_credentials_of_httpx_requests(log):
    request = httpx.Request(
        "POST",
        "https://mc.adobe.io/T/campaign/profileAndServices/profile",
        headers={"Authorization": "Bearer secret-token", "X-Api-Key": "secret-key"},
        json={"email": "a@example.com"},
    )

    assert request_interceptor(request, log=log) is request
    message = log.messages[0]
    assert "secret-token" not in message
    assert "secret-key" not in message
    assert "a@example.com" in message


def test_request_interceptor_uses_library_logger_by_default(caplog):
    caplog.set_level(logging.DEBUG, logger="aio-lib-campaign-standard")

    request_interceptor({"method": "GET"})

    assert "REQUEST:" in caplog.text


def test_response_interceptor_logs_parsed_payload(log):
    res = FakeResponse(True, '{"content": [{"PKey": "@abc"}]}')

    assert response_interceptor(res, log=log) is res
    assert len(log.messages) == 2
    assert log.messages[0].startswith("RESPONSE:")
    assert log.messages[1].startswith("DATA\n")
    assert '"PKey": "@abc"' in log.messages[1]


def test_response_interceptor_logs_raw_text_when_not_json(log):
    res = FakeResponse(True, "<html>gateway</html>")

    assert response_interceptor(res, log=log) is res
    assert log.messages[1] == "DATA\n <html>gateway</html>"


def test_response_interceptor_decodes_bytes(log):
    res = {"ok": True, "text": '{"name": "café"}'.encode("utf-8")}

    assert response_interceptor(res, log=log) is res
    assert "caf" in log.messages[1]


def test_response_interceptor_logs_marker_when_body_cannot_be_decoded(log):
    res = FakeResponse(True, b"\xff\xfe\xfa")

    assert response_interceptor(res, log=log) is res
    assert log.messages[1] == f"DATA\n {UNREADABLE_BODY}"


def test_response_interceptor_logs_marker_when_body_missing(log):
    res = FakeResponse(True, None)

    assert response_interceptor(res, log=log) is res
    assert log.messages[1] == f"DATA\n {UNREADABLE_BODY}"


def test_response_interceptor_skips_payload_for_failed_response(log):
    res = FakeResponse(False, '{"error": "nope"}')

    assert response_interceptor(res, log=log) is res
    assert len(log.messages) == 1
    assert log.messages[0].startswith("RESPONSE:")


def test_response_interceptor_handles_httpx_response(log):
    request = httpx.Request("GET", "https://mc.adobe.io/T/campaign/profileAndServices/profile")
    response = httpx.Response(HTTPStatus.OK, json={"count": {"value": 1}}, request=request)

    assert response_interceptor(response, log=log) is response
    assert '"status": 200' in log.messages[0]
    assert '"value": 1' in log.messages[1]


def test_reduce_error_formats_complete_response():
    error = {
        "response": {
            "status": 404,
            "statusText": "Not Found",
            "body": {"error_code": "NOT_FOUND", "message": "missing"},
        }
    }

    assert reduce_error(error) == '404 - Not Found ({"error_code":"NOT_FOUND","message":"missing"})'


def test_reduce_error_reads_attributes():
    class Response:
        status = 500
        statusText = "Internal Server Error"
        body = {}

    class ApiError(Exception):
        response = Response()

    assert reduce_error(ApiError()) == "500 - Internal Server Error ({})"


@pytest.mark.parametrize(
    "response",
    [
        {"statusText": "Bad Request", "body": {"a": 1}},
        {"status": 400, "body": {"a": 1}},
        {"status": 400, "statusText": "Bad Request"},
        {"status": 0, "statusText": "Bad Request", "body": {"a": 1}},
        {"status": 400, "statusText": "", "body": {"a": 1}},
        {"status": 400, "statusText": "Bad Request", "body": None},
    ],
)
def test_reduce_error_passes_incomplete_errors_through(response):
    error = {"response": response}

    assert reduce_error(error) is error


def test_reduce_error_passes_plain_errors_through():
    error = ValueError("network down")

    assert reduce_error(error) is error


def test_reduce_error_defaults_to_empty_mapping():
    assert reduce_error() == {}
    assert reduce_error(None) == {}


def test_reduce_error_understands_httpx_status_errors():
    request = httpx.Request("GET", "https://mc.adobe.io/T/campaign/profileAndServices/profile")
    response = httpx.Response(
        HTTPStatus.UNAUTHORIZED,
        json={"error_code": "401013", "message": "Oauth token is not valid"},
        request=request,
    )
    error = httpx.HTTPStatusError("unauthorized", request=request, response=response)

    assert (
        reduce_error(error)
        == '401 - Unauthorized ({"error_code":"401013","message":"Oauth token is not valid"})'
    )


def test_reduce_error_uses_text_body_of_httpx_response():
    request = httpx.Request("GET", "https://mc.adobe.io/T/campaign/workflow/execution/WKF1")
    response = httpx.Response(HTTPStatus.BAD_GATEWAY, text="  upstream timeout  ", request=request)
    error = httpx.HTTPStatusError("bad gateway", request=request, response=response)

    assert reduce_error(error) == '502 - Bad Gateway ("upstream timeout")'


class ResettingBody:
    ok = True

    def text(self):
        raise OSError("connection reset while reading body")


class Unprintable:
    def __str__(self):
        raise KeyError("no str")

    def __repr__(self):
        raise KeyError("no repr")


def test_response_interceptor_survives_body_read_errors(log):
    res = ResettingBody()

    assert response_interceptor(res, log=log) is res
    assert log.messages[1] == f"DATA\n {UNREADABLE_BODY}"


def test_request_interceptor_survives_members_that_cannot_be_printed(log):
    req = {"body": Unprintable()}

    assert request_interceptor(req, log=log) is req
    assert log.messages[0].startswith("REQUEST:\n <dict object at 0x")


def test_response_interceptor_survives_unprintable_response(log):
    res = {"ok": True, "text": '{"a": 1}', "raw": Unprintable()}

    assert response_interceptor(res, log=log) is res
    assert log.messages[0].startswith("RESPONSE:\n <dict object at 0x")
    assert '"a": 1' in log.messages[1]


def test_interceptors_skip_serialization_when_debug_disabled(monkeypatch, caplog):
    caplog.set_level(logging.WARNING, logger="aio-lib-campaign-standard")
    calls: list = []
    monkeypatch.setattr(
        "campaign_standard.helpers._serialize", lambda payload: calls.append(payload) or ""
    )
    req = {"method": "GET"}
    res = FakeResponse(True, '{"a": 1}')

    assert request_interceptor(req) is req
    assert response_interceptor(res) is res
    assert calls == []
    assert caplog.records == []


def test_interceptors_honour_injected_standard_logger():
    injected = logging.getLogger("tests.campaign_standard.quiet")
    injected.setLevel(logging.INFO)
    records: list = []

    class Collect(logging.Handler):
        def emit(self, record):
            records.append(record)

    handler = Collect()
    injected.addHandler(handler)
    try:
        request_interceptor({"method": "GET"}, log=injected)
        injected.setLevel(logging.DEBUG)
        request_interceptor({"method": "POST"}, log=injected)
    finally:
        injected.removeHandler(handler)

    assert len(records) == 1
    assert '"method": "POST"' in records[0].getMessage()
