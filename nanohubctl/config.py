"""Settings, validation and URL helpers for talking to a nanohub server."""

from __future__ import annotations

import json
import os
import posixpath
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import quote, unquote, urlsplit, urlunsplit

ENV_PREFIX = "NANOHUB_"
DEFAULT_API_USER = "nanohub"
DDM_API_PATH = "api/v1/ddm"
NANOCMD_API_PATH = "api/v1/nanocmd"

_UUID_LENGTHS = frozenset({36, 25})
_UUID_EXEMPT_COMMANDS = frozenset({"declarations", "declaration"})
_PATH_SAFE = "/$&+,:;=@"
_FIELD_DEFAULTS = {"api_user": DEFAULT_API_USER}
_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class ConfigError(Exception):
    """Raised when the settings are missing, invalid or unusable."""


@dataclass(frozen=True)
class Settings:
    """Connection settings shared by every command."""

    url: str = ""
    api_key: str = ""
    api_user: str = DEFAULT_API_USER
    client_id: str = ""


def load_settings(
    url: Optional[str] = None,
    api_key: Optional[str] = None,
    api_user: Optional[str] = None,
    client_id: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build settings: explicit values win, then NANOHUB_* variables, then defaults."""
    env = os.environ if environ is None else environ
    given_values = {
        "url": url,
        "api_key": api_key,
        "api_user": api_user,
        "client_id": client_id,
    }
    resolved = {}
    for field, given in given_values.items():
        if given is not None:
            resolved[field] = given
            continue
        from_env = env.get(ENV_PREFIX + field.upper())
        resolved[field] = from_env if from_env else _FIELD_DEFAULTS.get(field, "")
    return Settings(**resolved)


def valid_uuid(value: str) -> bool:
    """Return whether a client identifier has one of the accepted lengths."""
    return len(value) in _UUID_LENGTHS


def validate_settings(settings: Settings, command_path: Iterable[str]) -> None:
    """Check the settings needed before a command may run.

    ``command_path`` is the chain of command names, e.g. ``("ddm", "sync")``.
    Direct children of ``ddm`` (other than the declaration listings) need a
    valid client identifier.
    """
    path = list(command_path)
    if (
        len(path) >= 2
        and path[-2] == "ddm"
        and path[-1] not in _UUID_EXEMPT_COMMANDS
        and not valid_uuid(settings.client_id)
    ):
        raise ConfigError("Invalid UUID provided")
    if not settings.url:
        raise ConfigError("Base URL must be provided!")
    if not settings.api_key:
        raise ConfigError("API Key must be provided!")


def _join_path(*elements: str) -> str:
    parts = [element for element in elements if element]
    if not parts:
        return ""
    cleaned = posixpath.normpath("/".join(parts))
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _api_url(base_url: str, prefix: str, segments: Iterable[str]) -> str:
    try:
        parts = urlsplit(base_url)
    except ValueError as exc:
        raise ConfigError(f"invalid base URL {base_url!r}: {exc}") from exc
    path = _join_path(unquote(parts.path), prefix, *segments)
    if parts.netloc and path and not path.startswith("/"):
        path = "/" + path
    return urlunsplit(
        (parts.scheme, parts.netloc, quote(path, safe=_PATH_SAFE), parts.query, parts.fragment)
    )


def ddm_url(base_url: str, *args: str) -> str:
    """Return the DDM API URL under ``base_url`` with ``args`` appended to its path."""
    return _api_url(base_url, DDM_API_PATH, args)


def nanocmd_url(base_url: str, *args: str) -> str:
    """Return the NanoCMD API URL under ``base_url`` with ``args`` appended to its path."""
    return _api_url(base_url, NANOCMD_API_PATH, args)


def pretty_json(value: Any) -> str:
    """Render a JSON value with tab indentation and sorted object keys."""
    text = json.dumps(value, indent="\t", ensure_ascii=False, sort_keys=True)
    for char, escaped in _JSON_ESCAPES.items():
        text = text.replace(char, escaped)
    return text