import pytest
import responses
from responses import matchers

from nanohubctl.client import NanoHubClient
from nanohubctl.config import Settings
from nanohubctl.sets import SetChange
from nanohubctl.sync import (
    collect_sync_files,
    read_set_file,
    set_name_from_path,
    sync_directory,
)

BASE = "https://nanohub.example.com"


@pytest.fixture
def client():
    return NanoHubClient(Settings(url=BASE, api_key="placeholder"))


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.mark.parametrize(
    "path, expected",
    [
        ("decls/set.Default.txt", "default"),
        ("set.lab.txt", "lab"),
        ("nested/dir/setBar.txt", "setbar"),
    ],
)
def test_set_name_from_path(path, expected):
    assert set_name_from_path(path) == expected


def test_collect_sync_files_orders_and_filters(tmp_path):
    (tmp_path / "sub").mkdir()
    for name in ("a.json", "B.JSON", "sub/c.json", "set.one.txt", "sets-x.txt", "notes.txt", "readme.md"):
        (tmp_path / name).write_text("x")
    found = collect_sync_files(tmp_path)
    assert found.declarations == [tmp_path / "B.JSON", tmp_path / "a.json", tmp_path / "sub" / "c.json"]
    assert found.sets == [tmp_path / "set.one.txt", tmp_path / "sets-x.txt"]


def test_collect_sync_files_on_single_file(tmp_path):
    target = tmp_path / "only.json"
    target.write_text("{}")
    found = collect_sync_files(target)
    assert found.declarations == [target]
    assert found.sets == []


def test_collect_sync_files_missing_directory(tmp_path):
    missing = tmp_path / "nope"
    with pytest.raises(FileNotFoundError, match="does not exist"):
        collect_sync_files(missing)


def test_read_set_file_skips_comments_and_blanks(tmp_path):
    set_file = tmp_path / "set.demo.txt"
    set_file.write_bytes(b"# comment\ncom.example.a\n\n  com.example.b  \r\n   # indented\ncom.example.c")
    assert read_set_file(set_file) == ["com.example.a", "com.example.b", "com.example.c"]


def test_sync_directory_uploads_and_applies_sets(tmp_path, client, mocked):
    declaration = tmp_path / "decl.json"
    declaration.write_bytes(b'{"Type": "com.apple.configuration.test"}')
    (tmp_path / "set.Default.txt").write_text("com.example.a\ncom.example.b\n")
    (tmp_path / "set.empty.txt").write_text("# nothing here\n")

    mocked.add(responses.PUT, f"{BASE}/api/v1/ddm/declarations", status=200)
    set_url = f"{BASE}/api/v1/ddm/set-declarations/default"
    mocked.add(
        responses.PUT,
        set_url,
        status=204,
        match=[matchers.query_param_matcher({"declaration": "com.example.a"})],
    )
    mocked.add(
        responses.PUT,
        set_url,
        status=304,
        match=[matchers.query_param_matcher({"declaration": "com.example.b"})],
    )

    created, set_results = sync_directory(client, tmp_path)

    assert [path for path, _ in created] == [declaration]
    assert created[0][1].startswith("200")
    assert mocked.calls[0].request.body == declaration.read_bytes()
    assert list(set_results) == ["default", "empty"]
    assert [result.change for result in set_results["default"]] == [
        SetChange.ADDED,
        SetChange.ALREADY_PRESENT,
    ]
    assert set_results["empty"] == []