"""Operations on the declaration sets and status of a single enrolled device."""

from __future__ import annotations

import enum
from typing import Any, Union

from nanohubctl.client import ApiError, NanoHubClient
from nanohubctl.sets import SetChange

_NO_CONTENT = 204
_NOT_MODIFIED = 304
_INTERNAL_SERVER_ERROR = 500


class StatusKind(enum.Enum):
    """The kinds of status a device reports."""

    DECLARATIONS = "declarations"
    VALUES = "values"
    ERRORS = "errors"

    @property
    def endpoint(self) -> str:
        """The DDM API endpoint that serves this kind of status."""
        return _STATUS_ENDPOINTS[self]


_STATUS_ENDPOINTS = {
    StatusKind.DECLARATIONS: "declaration-status",
    StatusKind.VALUES: "status-values",
    StatusKind.ERRORS: "status-errors",
}


def _enrollment_set_url(client: NanoHubClient, device_id: str, set_name: str) -> str:
    return client.ddm_url("enrollment-sets", device_id, query={"set": set_name})


def device_sets(client: NanoHubClient, device_id: str) -> Any:
    """Return the sets applied to a device."""
    return client.get_json(client.ddm_url("enrollment-sets", device_id))


def add_device(client: NanoHubClient, device_id: str, set_name: str) -> SetChange:
    """Add a device to a set; raise ``ApiError`` if the server refuses."""
    response = client.put(_enrollment_set_url(client, device_id, set_name))
    if response.status_code == _NOT_MODIFIED:
        return SetChange.ALREADY_PRESENT
    if response.status_code == _NO_CONTENT:
        return SetChange.ADDED
    raise ApiError(response.text, status=response.status_code)


def remove_device(client: NanoHubClient, device_id: str, set_name: str) -> SetChange:
    """Remove a device from a set; raise ``ApiError`` if the server refuses."""
    response = client.delete(_enrollment_set_url(client, device_id, set_name))
    if response.status_code == _NOT_MODIFIED:
        return SetChange.NOT_PRESENT
    if response.status_code == _NO_CONTENT:
        return SetChange.REMOVED
    if response.status_code == _INTERNAL_SERVER_ERROR:
        raise ApiError("Set does not exist", status=response.status_code)
    raise ApiError(response.text, status=response.status_code)


def device_status(
    client: NanoHubClient, device_id: str, kind: Union[StatusKind, str]
) -> Any:
    """Return the declarations, values or errors a device has reported."""
    try:
        status_kind = StatusKind(kind)
    except ValueError:
        raise ValueError(f"{kind} is not a valid status type") from None
    return client.get_json(client.ddm_url(status_kind.endpoint, device_id))