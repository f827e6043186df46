# nanohubctl

A command line tool and a small Python client for the NanoHUB APIs. It manages
Declarative Device Management (DDM) declarations, declaration sets and the set
membership of devices, and it starts NanoCMD workflows.

## Installation

```
pip install .
```

This installs the `nanohubctl` command.

## Configuration

Every command that talks to the server needs the server's base URL and an API
key. Give them as options or as environment variables. An option wins over an
environment variable. An empty environment variable counts as unset.

| Option        | Environment variable | Default   |
|---------------|----------------------|-----------|
| `--url`       | `NANOHUB_URL`        |           |
| `--api_key`   | `NANOHUB_API_KEY`    |           |
| `--api_user`  | `NANOHUB_API_USER`   | `nanohub` |
| `--client_id` | `NANOHUB_CLIENT_ID`  |           |

The options are accepted before or after any subcommand. Requests are sent
with HTTP Basic authentication made of the API user and the API key.

`ddm sync` also checks that the client ID is 36 or 25 characters long and
refuses to run otherwise ("Invalid UUID provided").

```
export NANOHUB_URL=https://nanohub.example.com
export NANOHUB_API_KEY=placeholder
```

## Usage

List every declaration identifier on the server:

```
nanohubctl ddm declarations
```

Work with single declarations. `create` uploads a JSON file; `sets` first
checks that the declaration exists and then prints the sets it belongs to.

```
nanohubctl ddm declaration create /path/to/declaration.json
nanohubctl ddm declaration get com.example.declaration
nanohubctl ddm declaration sets com.example.declaration
nanohubctl ddm declaration delete com.example.declaration
```

Manage declaration sets:

```
nanohubctl ddm set list
nanohubctl ddm set get my-set
nanohubctl ddm set add --name my-set --identifier com.example.declaration
nanohubctl ddm set delete --name my-set --identifier com.example.declaration
```

`-n` and `-i` are short for `--name` and `--identifier`.

Manage a device's set membership and read what it has reported. The device is
the one given by `--client_id` (or `NANOHUB_CLIENT_ID`):

```
nanohubctl ddm device sets --client_id 00000000-0000-0000-0000-000000000000
nanohubctl ddm device add my-set --client_id 00000000-0000-0000-0000-000000000000
nanohubctl ddm device remove my-set --client_id 00000000-0000-0000-0000-000000000000
nanohubctl ddm device declarations --client_id 00000000-0000-0000-0000-000000000000
nanohubctl ddm device errors --client_id 00000000-0000-0000-0000-000000000000
nanohubctl ddm device values --client_id 00000000-0000-0000-0000-000000000000
```

Sync a directory with the server. Every file under the directory whose name
ends in `.json` (in any case) is uploaded as a declaration. Every file whose
name starts with `set` and ends in `.txt` lists, one per line, the declaration
identifiers to add to a set; the set name is the file name without a leading
`set.` and the trailing `.txt`, in lower case (`set.Office.txt` fills the set
`office`). Blank lines and lines starting with `#` are ignored.

```
nanohubctl ddm sync /path/to/directory --client_id 00000000-0000-0000-0000-000000000000
```

Start a NanoCMD workflow for a client. If the client ID argument is left out,
the `--client_id` value is used; if there is none, the command's help is shown.

```
nanohubctl nanocmd workflow io.micromdm.wf.devinfolog.v1 00000000-0000-0000-0000-000000000000
```

JSON replies are printed with tab indentation. `--vv` turns on debug logging,
`--version` prints the version, and `--help` works on every command. On error
the command prints `Error: ...` to standard error and exits with status 1.

## Using it from Python

```python
from nanohubctl.client import NanoHubClient
from nanohubctl.config import load_settings
from nanohubctl.declarations import list_declarations
from nanohubctl.sets import add_to_set

settings = load_settings(url="https://nanohub.example.com", api_key="placeholder")
client = NanoHubClient(settings)

print(list_declarations(client))
for result in add_to_set(client, "my-set", "com.example.declaration"):
    print(result.identifier, result.change)
```

- `nanohubctl.config`: `Settings`, `load_settings`, `validate_settings`,
  `valid_uuid`, `ddm_url`, `nanocmd_url`, `pretty_json` and `ConfigError`.
- `nanohubctl.client`: `NanoHubClient` (`get`, `put`, `post`, `delete`,
  `get_json`, `ddm_url`, `nanocmd_url`) and `ApiError`.
- `nanohubctl.declarations`: `list_declarations`, `get_declaration`,
  `declaration_sets`, `create_declarations`, `delete_declaration`, and two
  calls that read DDM data as an enrollment sees it, `enrollment_ddm` and
  `declaration_details`.
- `nanohubctl.sets`: `list_sets`, `set_declarations`, `add_to_set`,
  `remove_from_set`, with results as `SetResult` and `SetChange`.
- `nanohubctl.devices`: `device_sets`, `add_device`, `remove_device`,
  `device_status` and `StatusKind`.
- `nanohubctl.sync`: `collect_sync_files`, `read_set_file`,
  `set_name_from_path`, `sync_directory` and `SyncFiles`.
- `nanohubctl.workflows`: `start_workflow`.

## What it does not do

- It does not generate example declarations from the Apple device-management
  schemas; declarations must be written as JSON files by hand.
- `enrollment_ddm` and `declaration_details` are available from Python only;
  there is no command for them.
- A `ddm sync` uploads and adds, but never deletes declarations or removes
  them from sets.