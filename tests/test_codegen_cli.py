import json
from pathlib import Path

import pytest

from usos_codegen import cli
from usos_codegen.generator import GeneratedItems
from usos_core.errors import TransportError

from . import CONSUMER_REFERENCE, NOW_REFERENCE


@pytest.fixture
def reference_file(tmp_path: Path) -> Path:
    path = tmp_path / "apisrv.json"
    path.write_text(json.dumps([CONSUMER_REFERENCE, NOW_REFERENCE]), encoding="utf-8")
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "generated"


def test_parse_args_defaults() -> None:
    args = cli.parse_command_line_args(["services/apisrv"])

    assert args.paths == ["services/apisrv"]
    assert args.items is GeneratedItems.BOTH
    assert args.package_name == "usos_api"
    assert args.output_dir == Path("./generated")


def test_parse_args_items() -> None:
    assert cli.parse_command_line_args(["services", "--items", "functions"]).items is GeneratedItems.FUNCTIONS


def test_parse_args_requires_input() -> None:
    with pytest.raises(SystemExit):
        cli.parse_command_line_args([])


def test_parse_args_missing_reference_file(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        cli.parse_command_line_args(["--reference-file", str(tmp_path / "missing.json")])


def test_generate_from_reference_file(
    reference_file: Path, output_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = cli.main(["--reference-file", str(reference_file), "--output", str(output_dir)])

    assert exit_code == cli.EXIT_SUCCESS
    package = output_dir / "usos_api"
    assert (package / "apisrv" / "consumer.py").is_file()
    assert (package / "apisrv" / "now.py").is_file()
    assert "from . import now" in (package / "apisrv" / "__init__.py").read_text(encoding="utf-8")
    assert "generated successfully" in capsys.readouterr().out


def test_output_directory_is_cleaned(reference_file: Path, output_dir: Path) -> None:
    output_dir.mkdir()
    (output_dir / "stale.py").write_text("", encoding="utf-8")

    assert cli.main(["-r", str(reference_file), "-o", str(output_dir)]) == cli.EXIT_SUCCESS
    assert not (output_dir / "stale.py").exists()


def test_invalid_reference_restores_output(tmp_path: Path, output_dir: Path) -> None:
    output_dir.mkdir()
    (output_dir / "previous.py").write_text("x = 1\n", encoding="utf-8")
    invalid = tmp_path / "invalid.json"
    invalid.write_text(json.dumps({"name": "services/apisrv/now"}), encoding="utf-8")

    assert cli.main(["-r", str(invalid), "-o", str(output_dir)]) == cli.EXIT_INVALID_REFERENCE
    assert (output_dir / "previous.py").read_text(encoding="utf-8") == "x = 1\n"


def test_invalid_json(tmp_path: Path, output_dir: Path) -> None:
    invalid = tmp_path / "invalid.json"
    invalid.write_text("{not json", encoding="utf-8")

    assert cli.main(["-r", str(invalid), "-o", str(output_dir)]) == cli.EXIT_INVALID_REFERENCE


def test_api_error(monkeypatch: pytest.MonkeyPatch, output_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    class FailingTraversal:
        modules_seen: set[str] = set()

        def __init__(self, client, request_delay):  # noqa: ANN001
            pass

        def collect(self, paths):  # noqa: ANN001, ANN202
            raise TransportError("connection refused")

    monkeypatch.setattr(cli, "ReferenceTraversal", FailingTraversal)

    assert cli.main(["services/apisrv", "-o", str(output_dir)]) == cli.EXIT_API_ERROR
    assert "connection refused" in capsys.readouterr().err


def test_backup_and_clean_output_dir_restores_on_failure(output_dir: Path) -> None:
    output_dir.mkdir()
    (output_dir / "keep.txt").write_text("keep", encoding="utf-8")

    with pytest.raises(RuntimeError), cli.backup_and_clean_output_dir(output_dir):
        assert not (output_dir / "keep.txt").exists()
        (output_dir / "partial.txt").write_text("partial", encoding="utf-8")
        raise RuntimeError("generation failed")

    assert (output_dir / "keep.txt").read_text(encoding="utf-8") == "keep"
    assert not (output_dir / "partial.txt").exists()
