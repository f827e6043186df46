"""Starting NanoCMD workflows."""

from __future__ import annotations

import requests

from nanohubctl.client import ApiError, NanoHubClient


def start_workflow(
    client: NanoHubClient, workflow_name: str, client_id: str
) -> requests.Response:
    """Start a workflow for a client and return the server's response."""
    url = client.nanocmd_url("workflow", workflow_name, "start", query={"id": client_id})
    try:
        return client.post(url)
    except ApiError as exc:
        raise ApiError(f"failed to execute request: {exc}", status=exc.status) from exc