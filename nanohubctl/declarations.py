"""Operations on declarations stored on a nanohub server."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, Union

import requests

from nanohubctl.client import ApiError, NanoHubClient

PathLike = Union[str, Path]


def _string_list(value: Any, url: str) -> Optional[List[str]]:
    """Check that a decoded JSON value is null or a list of strings."""
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ApiError(f"expected a list of strings from {url}")
    return value


def _status_line(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


def list_declarations(client: NanoHubClient) -> List[str]:
    """Return the identifiers of every declaration on the server."""
    url = client.ddm_url("declarations")
    return _string_list(client.get_json(url), url) or []


def get_declaration(client: NanoHubClient, identifier: str) -> Any:
    """Return the stored declaration with the given identifier."""
    return client.get_json(client.ddm_url("declarations", identifier))


def declaration_sets(client: NanoHubClient, identifier: str) -> Optional[List[str]]:
    """Return the names of the sets a known declaration belongs to.

    Raises ``ValueError`` when the declaration is not on the server.
    """
    if identifier not in list_declarations(client):
        raise ValueError(f"{identifier} is not a valid declaration")
    url = client.ddm_url("declaration-sets", identifier)
    return _string_list(client.get_json(url), url)


def create_declarations(client: NanoHubClient, *args: PathLike) -> List[str]:
    """Upload each JSON file in ``args`` as a declaration.

    Returns the HTTP status line of each upload, in order. A file that cannot
    be read stops the run with ``OSError``.
    """
    url = client.ddm_url("declarations")
    statuses = []
    for json_path in args:
        payload = Path(json_path).read_bytes()
        response = client.put(url, data=payload)
        statuses.append(_status_line(response))
    return statuses


def delete_declaration(client: NanoHubClient, identifier: str) -> str:
    """Delete a declaration and return the server's reply text."""
    response = client.delete(client.ddm_url("declarations", identifier))
    return response.text


def enrollment_ddm(client: NanoHubClient, kind: str, device_id: str) -> Any:
    """Fetch DDM data as seen by an enrollment.

    ``kind`` is one of ``token``, ``declarations`` or ``errors``.
    """
    if kind == "token":
        segments = ("tokens",)
    elif kind == "declarations":
        segments = ("declaration-items",)
    elif kind == "errors":
        segments = ("ddm-errors", device_id)
    else:
        raise ValueError(f"{kind} is not a valid ddm type")
    return client.get_json(client.ddm_url(*segments), enrollment_id=device_id)


def declaration_details(
    client: NanoHubClient, device_id: str, declaration_type: str, identifier: str
) -> Any:
    """Fetch one declaration of the given type as seen by an enrollment."""
    url = client.ddm_url("declaration", declaration_type, identifier)
    return client.get_json(url, enrollment_id=device_id)