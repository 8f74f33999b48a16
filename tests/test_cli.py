import json

from hookchain import cli


def _manifest_text(module: str, *listeners: tuple[str, str]) -> str:
    lines = ["name: cli-test", "listeners:"]
    for key, attr in listeners:
        lines.append(f"  - key: {key}")
        lines.append(f"    target: {module}:{attr}")
    return "\n".join(lines) + "\n"


def test_cli_parser_supports_commands() -> None:
    parser = cli.build_parser()
    parsed = parser.parse_args(["run", "chain.yaml", "a", "b", "--join"])
    assert parsed.command == "run"
    assert parsed.args == ["a", "b"]
    assert parsed.join

    parsed_describe = parser.parse_args(["describe", "chain.yaml", "--json"])
    assert parsed_describe.command == "describe"


def test_run_prints_results(sample_module: str, write_manifest, capsys) -> None:
    path = write_manifest(_manifest_text(sample_module, ("echo", "echo"), ("allow", "allow")))

    exit_code = cli.main(["run", str(path), "admin"])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == [["admin"], True]


def test_run_join_prints_consensus(sample_module: str, write_manifest, capsys) -> None:
    path = write_manifest(_manifest_text(sample_module, ("allow", "allow"), ("abstain", "abstain")))

    assert cli.main(["run", str(path), "guest", "--join"]) == 0
    assert json.loads(capsys.readouterr().out) is False

    assert cli.main(["run", str(path), "admin", "--join", "--summary"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["outcome"] is True
    assert summary["successes"] == 1
    assert summary["dont_cares"] == 1
    assert summary["others"] == 0


def test_run_returns_nonzero_on_listener_failure(sample_module: str, write_manifest, capsys) -> None:
    path = write_manifest(_manifest_text(sample_module, ("explode", "explode"), ("echo", "echo")))

    assert cli.main(["run", str(path)]) == 1
    assert capsys.readouterr().out == ""


def test_describe_lists_keys(sample_module: str, write_manifest, capsys) -> None:
    path = write_manifest(_manifest_text(sample_module, ("echo", "echo"), ("allow", "allow")))

    assert cli.main(["describe", str(path)]) == 0
    assert capsys.readouterr().out.split() == ["echo", "allow"]

    assert cli.main(["describe", str(path), "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == {"name": "cli-test", "keys": ["echo", "allow"]}


def test_bad_manifest_target_exits_with_error(write_manifest) -> None:
    path = write_manifest("listeners:\n  - key: a\n    target: missing_module_abc:fn\n")
    assert cli.main(["describe", str(path)]) == 2


def test_summary_flag_implies_join(sample_module: str, write_manifest, capsys) -> None:
    path = write_manifest(_manifest_text(sample_module, ("allow", "allow"), ("echo", "echo")))

    assert cli.main(["run", str(path), "guest", "--summary"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["outcome"] is True
    assert summary["failures"] == 1
    assert summary["others"] == 1
    assert summary["total"] == 2


def test_missing_manifest_exits_with_error(tmp_path, capsys) -> None:
    assert cli.main(["run", str(tmp_path / "nope.yaml")]) == 2
    assert capsys.readouterr().out == ""
