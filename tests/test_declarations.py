import json

import pytest
import responses

from nanohubctl.client import ApiError, NanoHubClient
from nanohubctl.config import Settings
from nanohubctl.declarations import (
    create_declarations,
    declaration_details,
    declaration_sets,
    delete_declaration,
    enrollment_ddm,
    get_declaration,
    list_declarations,
)

BASE = "http://nanohub.example.com"
DDM = BASE + "/api/v1/ddm"
DEVICE = "00000000-0000-0000-0000-000000000000"


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    return NanoHubClient(Settings(url=BASE, api_key="placeholder", client_id=DEVICE))


def test_list_declarations_returns_identifiers(mocked, client):
    mocked.add(responses.GET, DDM + "/declarations", json=["com.example.a", "com.example.b"])
    assert list_declarations(client) == ["com.example.a", "com.example.b"]
    assert mocked.calls[0].request.headers["Authorization"].startswith("Basic ")


def test_list_declarations_null_is_empty(mocked, client):
    mocked.add(responses.GET, DDM + "/declarations", body="null")
    assert list_declarations(client) == []


def test_list_declarations_rejects_non_list(mocked, client):
    mocked.add(responses.GET, DDM + "/declarations", json={"a": 1})
    with pytest.raises(ApiError):
        list_declarations(client)


def test_get_declaration_returns_document(mocked, client):
    document = {"Identifier": "com.example.a", "Type": "com.apple.configuration.test"}
    mocked.add(responses.GET, DDM + "/declarations/com.example.a", json=document)
    assert get_declaration(client, "com.example.a") == document


def test_declaration_sets_for_known_declaration(mocked, client):
    mocked.add(responses.GET, DDM + "/declarations", json=["com.example.a"])
    mocked.add(responses.GET, DDM + "/declaration-sets/com.example.a", json=["default", "lab"])
    assert declaration_sets(client, "com.example.a") == ["default", "lab"]


def test_declaration_sets_unknown_declaration(mocked, client):
    mocked.add(responses.GET, DDM + "/declarations", json=["com.example.a"])
    with pytest.raises(ValueError, match="com.example.missing is not a valid declaration"):
        declaration_sets(client, "com.example.missing")
    assert len(mocked.calls) == 1


def test_create_declarations_uploads_each_file(mocked, client, tmp_path):
    first = tmp_path / "one.json"
    second = tmp_path / "two.json"
    first.write_text(json.dumps({"Identifier": "com.example.one"}))
    second.write_text(json.dumps({"Identifier": "com.example.two"}))
    mocked.add(responses.PUT, DDM + "/declarations", status=204)
    mocked.add(responses.PUT, DDM + "/declarations", status=204)

    statuses = create_declarations(client, first, str(second))

    assert statuses == ["204 No Content", "204 No Content"]
    bodies = [call.request.body for call in mocked.calls]
    assert bodies == [first.read_bytes(), second.read_bytes()]
    assert all(call.request.method == "PUT" for call in mocked.calls)


def test_create_declarations_missing_file(client, tmp_path):
    with pytest.raises(FileNotFoundError):
        create_declarations(client, tmp_path / "absent.json")


def test_delete_declaration_returns_body(mocked, client):
    mocked.add(responses.DELETE, DDM + "/declarations/com.example.a", body="deleted")
    assert delete_declaration(client, "com.example.a") == "deleted"
    assert mocked.calls[0].request.method == "DELETE"


def test_enrollment_ddm_token_sends_enrollment_header(mocked, client):
    mocked.add(responses.GET, DDM + "/tokens", json={"SyncTokens": {}})
    assert enrollment_ddm(client, "token", DEVICE) == {"SyncTokens": {}}
    assert mocked.calls[0].request.headers["X-Enrollment-ID"] == DEVICE


def test_enrollment_ddm_declarations_path(mocked, client):
    mocked.add(responses.GET, DDM + "/declaration-items", json={"Declarations": {}})
    assert enrollment_ddm(client, "declarations", DEVICE) == {"Declarations": {}}


def test_enrollment_ddm_errors_includes_device(mocked, client):
    mocked.add(responses.GET, DDM + "/ddm-errors/" + DEVICE, json=[])
    assert enrollment_ddm(client, "errors", DEVICE) == []
    assert mocked.calls[0].request.url.endswith("/ddm-errors/" + DEVICE)


def test_enrollment_ddm_unknown_kind(client):
    with pytest.raises(ValueError, match="bogus is not a valid ddm type"):
        enrollment_ddm(client, "bogus", DEVICE)


def test_declaration_details(mocked, client):
    url = DDM + "/declaration/configuration/com.example.a"
    mocked.add(responses.GET, url, json={"Identifier": "com.example.a"})
    result = declaration_details(client, DEVICE, "configuration", "com.example.a")
    assert result == {"Identifier": "com.example.a"}
    assert mocked.calls[0].request.headers["X-Enrollment-ID"] == DEVICE