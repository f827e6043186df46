"""Command line interface for working with nanohub APIs."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import requests

from nanohubctl.client import ApiError, NanoHubClient
from nanohubctl.config import ConfigError, load_settings, pretty_json, validate_settings
from nanohubctl.declarations import (
    create_declarations,
    declaration_sets,
    delete_declaration,
    get_declaration,
    list_declarations,
)
from nanohubctl.devices import StatusKind, add_device, device_sets, device_status, remove_device
from nanohubctl.sets import (
    SetChange,
    SetResult,
    add_to_set,
    list_sets,
    remove_from_set,
    set_declarations,
)
from nanohubctl.sync import sync_directory
from nanohubctl.workflows import start_workflow

VERSION = "1.0.3"

Handler = Callable[[argparse.Namespace, NanoHubClient], Optional[int]]


def _status_line(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


def _print_add_results(results: Iterable[SetResult]) -> None:
    for result in results:
        print(f"\nAdding {result.identifier} to set {result.set_name}...")
        if result.change is SetChange.ALREADY_PRESENT:
            print(f"{result.identifier} is already in {result.set_name}")
        elif result.change is SetChange.ADDED:
            print(f"{result.identifier} has been added to set: {result.set_name}")
        else:
            print(result.status_line)
            print("Error adding declaration to set:", result.identifier, "in", result.set_name)


def _declarations_list(args: argparse.Namespace, client: NanoHubClient) -> None:
    for identifier in list_declarations(client):
        print(identifier)


def _declaration_get(args: argparse.Namespace, client: NanoHubClient) -> None:
    print(f"Getting declaration for identifier {args.identifier}")
    print(pretty_json(get_declaration(client, args.identifier)))


def _declaration_sets(args: argparse.Namespace, client: NanoHubClient) -> None:
    names = declaration_sets(client, args.identifier)
    print(f"Getting set membership for identifier {args.identifier}")
    print(pretty_json(names))


def _declaration_create(args: argparse.Namespace, client: NanoHubClient) -> None:
    (status,) = create_declarations(client, args.path)
    print(f"Creating declaration using {args.path}")
    print(status)


def _declaration_delete(args: argparse.Namespace, client: NanoHubClient) -> None:
    print(f"Getting declaration for identifier {args.identifier}")
    print(delete_declaration(client, args.identifier))


def _set_list(args: argparse.Namespace, client: NanoHubClient) -> None:
    print("Listing all available sets")
    print(pretty_json(list_sets(client)))


def _set_get(args: argparse.Namespace, client: NanoHubClient) -> None:
    name = args.names[0]
    print(f"Getting set for identifier {name}\n")
    declarations = set_declarations(client, name)
    if declarations is None:
        print("No declarations found")
        return
    print(pretty_json(declarations))


def _set_add(args: argparse.Namespace, client: NanoHubClient) -> None:
    _print_add_results(add_to_set(client, args.name, args.identifier))


def _set_delete(args: argparse.Namespace, client: NanoHubClient) -> None:
    print(f"Removing {args.identifier} from set {args.name}...\n")
    result = remove_from_set(client, args.name, args.identifier)
    if result.change is SetChange.NOT_PRESENT:
        print(f"{args.identifier} does not exist in {args.name}")
    else:
        print(f"{args.identifier} has been removed from set: {args.name}")


def _device_sets(args: argparse.Namespace, client: NanoHubClient) -> None:
    print(pretty_json(device_sets(client, client.settings.client_id)))


def _device_add(args: argparse.Namespace, client: NanoHubClient) -> None:
    device_id = client.settings.client_id
    change = add_device(client, device_id, args.set_name)
    if change is SetChange.ALREADY_PRESENT:
        print(f"{device_id} is already in {args.set_name}")
    else:
        print(f"{device_id} has been added to {args.set_name}")


def _device_remove(args: argparse.Namespace, client: NanoHubClient) -> None:
    device_id = client.settings.client_id
    print(f"Removing device {device_id} from set {args.set_name}...")
    change = remove_device(client, device_id, args.set_name)
    if change is SetChange.NOT_PRESENT:
        print(f"{device_id} is not in set: {args.set_name}")
    else:
        print(f"{device_id} has been removed from {args.set_name}")


def _device_status(args: argparse.Namespace, client: NanoHubClient) -> None:
    print(pretty_json(device_status(client, client.settings.client_id, args.status_kind)))


def _sync(args: argparse.Namespace, client: NanoHubClient) -> None:
    created, set_results = sync_directory(client, args.directory)
    for path, status in created:
        print(f"Creating declaration using {path}")
        print(status)
    for name, results in set_results.items():
        if not results:
            print(f"No identifiers found for set {name}, skipping...")
            continue
        _print_add_results(results)
    for name, results in set_results.items():
        print(f"Synced {len(results)} declarations in set '{name}'")
    print(f"Synced {len(created)} declarations to NanoHUB")


def _workflow(args: argparse.Namespace, client: NanoHubClient) -> None:
    if args.workflow_client_id is not None:
        client_id = args.workflow_client_id
    else:
        client_id = client.settings.client_id
        if not client_id:
            args.help_parser.print_help()
            return
    response = start_workflow(client, args.workflow_name, client_id)
    if 200 <= response.status_code < 300:
        print(f"Workflow {args.workflow_name} started successfully for client {client_id}")
    else:
        print(f"Failed to start workflow. Status: {_status_line(response)}")


def _add_common(parser: argparse.ArgumentParser, suppress: bool) -> None:
    value_default = argparse.SUPPRESS if suppress else None
    flag_default = argparse.SUPPRESS if suppress else False
    parser.add_argument("--url", default=value_default, help="URL of the nanohub instance")
    parser.add_argument("--api_key", default=value_default, help="API key for the nanohub instance")
    parser.add_argument(
        "--api_user", default=value_default, help="API user for the nanohub instance (default: nanohub)"
    )
    parser.add_argument("--client_id", default=value_default, help="Client ID to apply items to")
    parser.add_argument("--debug", action="store_true", default=flag_default, help="Run in debug mode")
    parser.add_argument("--vv", action="store_true", default=flag_default, help="Run in verbose logging mode")


def _command(
    subparsers: "argparse._SubParsersAction[argparse.ArgumentParser]",
    name: str,
    help_text: str,
    path: Tuple[str, ...],
    handler: Optional[Handler] = None,
) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(name, help=help_text, description=help_text)
    _add_common(parser, suppress=True)
    parser.set_defaults(command_path=path, handler=handler, help_parser=parser)
    return parser


def _add_ddm(top: "argparse._SubParsersAction[argparse.ArgumentParser]") -> None:
    ddm = _command(top, "ddm", "All declarative device management operations", ("ddm",))
    ddm_sub = ddm.add_subparsers(metavar="command")

    _command(ddm_sub, "declarations", "List all declarations on the server", ("ddm", "declarations"), _declarations_list)

    declaration = _command(ddm_sub, "declaration", "Declaration related operations", ("ddm", "declaration"))
    declaration_sub = declaration.add_subparsers(metavar="command")
    base = ("ddm", "declaration")
    create = _command(declaration_sub, "create", "Create declaration", base + ("create",), _declaration_create)
    create.add_argument("path", metavar="/path/to/declaration.json")
    for name, help_text, handler in (
        ("get", "Get declaration details for identifier", _declaration_get),
        ("delete", "Delete declaration", _declaration_delete),
        ("sets", "List set membership for a given declaration", _declaration_sets),
    ):
        command = _command(declaration_sub, name, help_text, base + (name,), handler)
        command.add_argument("identifier", metavar="com.example.declaration")

    set_group = _command(ddm_sub, "set", "Handles all set related operations", ("ddm", "set"))
    set_sub = set_group.add_subparsers(metavar="command")
    base = ("ddm", "set")
    _command(set_sub, "list", "List all sets", base + ("list",), _set_list)
    add = _command(set_sub, "add", "Add a declaration to a set", base + ("add",), _set_add)
    add.add_argument("-n", "--name", required=True, help="Name of the set to add item to")
    add.add_argument("-i", "--identifier", required=True, help="Identifier of the declaration to add to the set")
    get = _command(set_sub, "get", "Get the declarations for a set", base + ("get",), _set_get)
    get.add_argument("names", nargs="+", metavar="set name")
    delete = _command(set_sub, "delete", "Delete a declaration from a set", base + ("delete",), _set_delete)
    delete.add_argument("-n", "--name", required=True, help="Name of the set to delete the declaration from")
    delete.add_argument(
        "-i", "--identifier", required=True, help="Identifier of the declaration to remove from the set"
    )

    device = _command(ddm_sub, "device", "Device related operations", ("ddm", "device"))
    device_sub = device.add_subparsers(metavar="command")
    base = ("ddm", "device")
    device_add = _command(device_sub, "add", "Add a device to a declaration set", base + ("add",), _device_add)
    device_add.add_argument("set_name", metavar="set")
    _command(device_sub, "sets", "Get all sets for a given device", base + ("sets",), _device_sets)
    device_remove = _command(
        device_sub, "remove", "Remove device from an enrollment set", base + ("remove",), _device_remove
    )
    device_remove.add_argument("set_name", metavar="set")
    for kind in StatusKind:
        status = _command(
            device_sub,
            kind.value,
            f"List {kind.value} for a specified device ID",
            base + (kind.value,),
            _device_status,
        )
        status.set_defaults(status_kind=kind)

    sync = _command(ddm_sub, "sync", "Sync directory with DDM", ("ddm", "sync"), _sync)
    sync.add_argument("directory", metavar="/path/to/directory")


def _add_nanocmd(top: "argparse._SubParsersAction[argparse.ArgumentParser]") -> None:
    nanocmd = _command(top, "nanocmd", "nanocmd operations on nanohub", ("nanocmd",))
    nanocmd_sub = nanocmd.add_subparsers(metavar="command")
    workflow = _command(
        nanocmd_sub,
        "workflow",
        "Start a workflow by name for a specific client ID. "
        "If client-id is not provided, uses --client_id flag value.",
        ("nanocmd", "workflow"),
        _workflow,
    )
    workflow.add_argument("workflow_name", metavar="workflow-name")
    workflow.add_argument("workflow_client_id", nargs="?", metavar="client-id")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for every command."""
    parser = argparse.ArgumentParser(
        prog="nanohubctl",
        description="A command line tool for working with nanohub APIs",
    )
    _add_common(parser, suppress=False)
    parser.add_argument("--version", action="version", version=f"%(prog)s version {VERSION}")
    parser.set_defaults(command_path=(), handler=None, help_parser=parser)
    top = parser.add_subparsers(metavar="subcommand")
    _add_ddm(top)
    _add_nanocmd(top)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line tool and return its exit status."""
    parser = build_parser()
    try:
        args = parser.parse_args(None if argv is None else list(argv))
    except SystemExit as exc:
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else 1

    logging.basicConfig(level=logging.DEBUG if args.vv else logging.WARNING)

    if args.handler is None:
        args.help_parser.print_help()
        return 0

    settings = load_settings(
        url=args.url, api_key=args.api_key, api_user=args.api_user, client_id=args.client_id
    )
    try:
        validate_settings(settings, args.command_path)
        return args.handler(args, NanoHubClient(settings)) or 0
    except (ConfigError, ApiError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())