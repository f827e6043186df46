"""Operations on declaration sets stored on a nanohub server."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, List, Optional

import requests

from nanohubctl.client import ApiError, NanoHubClient


class SetChange(enum.Enum):
    """Outcome of adding a declaration to, or removing it from, a set."""

    ADDED = "added"
    ALREADY_PRESENT = "already present"
    REMOVED = "removed"
    NOT_PRESENT = "not present"
    FAILED = "failed"


@dataclass(frozen=True)
class SetResult:
    """What happened to one declaration in one set."""

    set_name: str
    identifier: str
    change: SetChange
    status: int
    status_line: str
    message: str = ""


_NO_CONTENT = 204
_NOT_MODIFIED = 304


def _string_list(value: Any, url: str) -> Optional[List[str]]:
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ApiError(f"expected a list of strings from {url}")
    return value


def _status_line(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


def _item_url(client: NanoHubClient, name: str, identifier: str) -> str:
    return client.ddm_url("set-declarations", name, query={"declaration": identifier})


def list_sets(client: NanoHubClient) -> Optional[List[str]]:
    """Return the names of all sets on the server."""
    url = client.ddm_url("sets")
    return _string_list(client.get_json(url), url)


def set_declarations(client: NanoHubClient, name: str) -> Optional[List[str]]:
    """Return the declarations in a set, or ``None`` when the server has none."""
    url = client.ddm_url("set-declarations", name)
    return _string_list(client.get_json(url), url)


def add_to_set(client: NanoHubClient, name: str, *args: str) -> List[SetResult]:
    """Add each declaration in ``args`` to a set.

    A rejected addition is reported as ``SetChange.FAILED`` and the rest
    are still attempted.
    """
    results = []
    for identifier in args:
        response = client.put(_item_url(client, name, identifier))
        if response.status_code == _NOT_MODIFIED:
            change, message = SetChange.ALREADY_PRESENT, ""
        elif response.status_code == _NO_CONTENT:
            change, message = SetChange.ADDED, ""
        else:
            change, message = SetChange.FAILED, response.text
        results.append(
            SetResult(
                set_name=name,
                identifier=identifier,
                change=change,
                status=response.status_code,
                status_line=_status_line(response),
                message=message,
            )
        )
    return results


def remove_from_set(client: NanoHubClient, name: str, identifier: str) -> SetResult:
    """Remove a declaration from a set; raise ``ApiError`` if the server refuses."""
    response = client.delete(_item_url(client, name, identifier))
    if response.status_code == _NOT_MODIFIED:
        change = SetChange.NOT_PRESENT
    elif response.status_code == _NO_CONTENT:
        change = SetChange.REMOVED
    else:
        raise ApiError(response.text, status=response.status_code)
    return SetResult(
        set_name=name,
        identifier=identifier,
        change=change,
        status=response.status_code,
        status_line=_status_line(response),
    )