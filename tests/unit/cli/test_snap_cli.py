import pytest

from snapverify.cli.snap import build_parser, main


@pytest.fixture
def root(tmp_path):
    additions = tmp_path / "Additions"
    additions.mkdir()
    (additions / "t.test_a.1.txt").write_bytes(b"a")
    (additions / "t.test_b.1.txt").write_bytes(b"b")
    (tmp_path / "Changes").mkdir()
    (tmp_path / "Changes" / "t.test_c.1.txt").write_bytes(b"c")
    return tmp_path


def test_parser_requires_command():
    with pytest.raises(SystemExit) as exc_info:
        build_parser().parse_args([])
    assert exc_info.value.code == 2


def test_status_lists_pending_artifacts(root, capsys):
    assert main(["status", "--root", str(root)]) == 1

    out = capsys.readouterr().out
    assert "Additions: 2" in out
    assert "Changes: 1" in out
    assert "Differences: 0" in out
    assert "t.test_a.1.txt" in out


def test_status_clean_root_exits_zero(tmp_path):
    assert main(["status", "--root", str(tmp_path)]) == 0


def test_promote_all_copies_without_deleting(root):
    assert main(["promote", "--root", str(root)]) == 0

    assert (root / "References" / "t.test_a.1.txt").read_bytes() == b"a"
    assert (root / "References" / "t.test_b.1.txt").read_bytes() == b"b"
    assert (root / "Additions" / "t.test_a.1.txt").exists()


def test_promote_named_only(root):
    assert main(["promote", "--root", str(root), "t.test_b.1.txt"]) == 0

    assert not (root / "References" / "t.test_a.1.txt").exists()
    assert (root / "References" / "t.test_b.1.txt").exists()


def test_promote_unknown_name_fails(root, capsys):
    assert main(["promote", "--root", str(root), "missing.txt"]) == 1
    assert "missing.txt" in capsys.readouterr().err


def test_promote_dry_run_writes_nothing(root):
    assert main(["promote", "--root", str(root), "--dry-run"]) == 0
    assert not (root / "References").exists()


def test_promote_emits_events(root):
    events = root / "events.jsonl"
    assert main(["promote", "--root", str(root), "--events", str(events)]) == 0
    assert b'"cli_promote"' in events.read_bytes()


def test_config_directory_names_are_honored(tmp_path):
    (tmp_path / "snap.toml").write_text('[tool.snapverify.directories]\nadditions = "New"\n')
    (tmp_path / "New").mkdir()
    (tmp_path / "New" / "t.x.1").write_bytes(b"x")

    assert main(["promote", "--root", str(tmp_path), "--config", str(tmp_path / "snap.toml")]) == 0
    assert (tmp_path / "References" / "t.x.1").read_bytes() == b"x"


def test_missing_config_is_runtime_error(tmp_path, capsys):
    assert main(["status", "--root", str(tmp_path), "--config", str(tmp_path / "nope.toml")]) == 1
    assert "snap:" in capsys.readouterr().err
