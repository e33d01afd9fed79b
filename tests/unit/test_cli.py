#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_cli.py
"""Tests for the doc2conf command-line interface.

The CLI is exercised in-process through :func:`doc2conf.cli.main`. Every
test runs in its own temporary working and home directory so no real
configuration file is discovered.

"""

import argparse
import io
import json
import logging
from pathlib import Path

import pytest

from doc2conf.cli import main, resolve_options
from doc2conf.cli.builder import (
    EXIT_DEPENDENCY_ERROR,
    EXIT_SUCCESS,
    EXIT_USAGE_ERROR,
    OptionsCLIBuilder,
    create_parser,
)
from doc2conf.cli.config import find_config_in_parents, load_config_file, load_config_with_priority
from doc2conf.cli.output import print_output
from doc2conf.exceptions import DependencyError


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path, monkeypatch):
    """Run each test in a clean directory with no doc2conf environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("DOC2CONF_LOG_LEVEL", "DOC2CONF_SPACE", "DOC2CONF_INSTANCE_TYPE", "DOC2CONF_SCHEMA_CACHE",
                 "DOC2CONF_CONFIG"):
        monkeypatch.delenv(name, raising=False)

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def page(tmp_path: Path) -> Path:
    path = tmp_path / "page.md"
    path.write_text("# Title\n\n- [ ] one\n- [x] two\n", encoding="utf-8")
    return path


def _parse(*args: str) -> tuple[argparse.Namespace, OptionsCLIBuilder]:
    builder = OptionsCLIBuilder()
    return create_parser(builder).parse_args(["convert", *args]), builder


@pytest.mark.cli
@pytest.mark.unit
class TestConvertCommand:
    """Tests for the convert subcommand."""

    def test_default_output_is_adf_json(self, page: Path) -> None:
        """Test that ADF JSON is written next to the input."""
        assert main(["convert", "page.md"]) == EXIT_SUCCESS

        data = json.loads((page.parent / "page.adf.json").read_text(encoding="utf-8"))
        assert data["type"] == "doc"
        assert [node["type"] for node in data["content"]] == ["heading", "taskList"]

    def test_storage_flag(self, page: Path) -> None:
        """Test storage output."""
        assert main(["convert", "page.md", "--storage"]) == EXIT_SUCCESS

        markup = (page.parent / "page.storage.xml").read_text(encoding="utf-8")
        assert markup.startswith("<h1>Title</h1>")
        assert 'ac:name="tasklist"' in markup

    def test_server_instance_writes_storage(self, page: Path) -> None:
        """Test that Server targets get storage markup."""
        assert main(["convert", "page.md", "--instance-type", "server"]) == EXIT_SUCCESS
        assert (page.parent / "page.storage.xml").is_file()

    def test_explicit_output(self, page: Path, tmp_path: Path) -> None:
        """Test the output flag."""
        target = tmp_path / "out"
        target.mkdir()
        assert main(["convert", "page.md", "-o", str(target / "body.json")]) == EXIT_SUCCESS
        assert json.loads((target / "body.json").read_text(encoding="utf-8"))["version"] == 1

    def test_unwritable_output(self, page: Path, tmp_path: Path, capsys) -> None:
        """Test that an output path in a missing directory is a file error."""
        assert main(["convert", "page.md", "-o", str(tmp_path / "absent" / "body.json")]) == EXIT_USAGE_ERROR
        assert "Failed to write output" in capsys.readouterr().err

    def test_dry_run_prints(self, page: Path, capsys) -> None:
        """Test that dry runs print and write nothing."""
        assert main(["convert", "page.md", "--dry-run", "--toc"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["content"][0]["attrs"]["extensionKey"] == "toc"
        assert not (page.parent / "page.adf.json").exists()

    def test_positional_ids_are_reproducible(self, page: Path, capsys) -> None:
        """Test that positional ids give identical output across runs."""
        main(["convert", "page.md", "-o", "-", "--local-ids", "positional"])
        first = capsys.readouterr().out
        main(["convert", "page.md", "-o", "-", "--local-ids", "positional"])
        assert capsys.readouterr().out == first
        assert "task-00000001" in first

    def test_missing_file(self) -> None:
        """Test that a missing input is a usage error."""
        assert main(["convert", "absent.md"]) == EXIT_USAGE_ERROR

    def test_unknown_extension(self, tmp_path: Path) -> None:
        """Test that an unrecognized extension is a usage error."""
        (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
        assert main(["convert", "notes.txt"]) == EXIT_USAGE_ERROR

    def test_format_flag_overrides_extension(self, tmp_path: Path, capsys) -> None:
        """Test reading a file with an explicit format."""
        (tmp_path / "notes.txt").write_text("a,b\n1,2\n", encoding="utf-8")

        assert main(["convert", "notes.txt", "--format", "csv", "--dry-run"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["content"][0]["type"] == "table"

    def test_environment_instance_type(self, page: Path, monkeypatch) -> None:
        """Test the instance type environment variable."""
        monkeypatch.setenv("DOC2CONF_INSTANCE_TYPE", "server")

        assert main(["convert", "page.md"]) == EXIT_SUCCESS
        assert (page.parent / "page.storage.xml").is_file()

    def test_invalid_environment_value(self, page: Path, monkeypatch) -> None:
        """Test that an unsupported environment value is a usage error."""
        monkeypatch.setenv("DOC2CONF_INSTANCE_TYPE", "desktop")
        assert main(["convert", "page.md"]) == EXIT_USAGE_ERROR

    def test_stdin(self, monkeypatch, capsys) -> None:
        """Test reading Markdown from standard input."""
        monkeypatch.setattr("sys.stdin", io.StringIO("---\nmacroFormat: markdown\n---\n# Hi\n"))

        assert main(["convert", "-"]) == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["content"][0]["attrs"]["extensionKey"] == "markdown"
        assert data["content"][0]["content"][0]["text"] == "# Hi"

    def test_missing_asciidoctor(self, tmp_path: Path, monkeypatch) -> None:
        """Test that a missing executable maps to the dependency exit code."""
        monkeypatch.setattr("doc2conf.parsers.asciidoc.find_executable", lambda name: None)
        (tmp_path / "guide.adoc").write_text("= Guide\n", encoding="utf-8")

        assert main(["convert", "guide.adoc"]) == EXIT_DEPENDENCY_ERROR

    def test_rich_without_rich(self, page: Path, monkeypatch) -> None:
        """Test that requesting highlighting without rich is a dependency error."""
        monkeypatch.setattr("doc2conf.cli.output.check_rich_available", lambda: False)
        assert main(["convert", "page.md", "--dry-run", "--rich"]) == EXIT_DEPENDENCY_ERROR

    def test_version(self, capsys) -> None:
        """Test the version flag."""
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert capsys.readouterr().out.startswith("doc2conf ")


@pytest.mark.cli
@pytest.mark.unit
class TestConfigFiles:
    """Tests for configuration file handling."""

    def test_explicit_toml_config(self, page: Path, tmp_path: Path, capsys) -> None:
        """Test options from a TOML file."""
        config = tmp_path / "settings.toml"
        config.write_text('generate_toc = true\n\n[storage]\ntask_list_title = "Checklist"\n', encoding="utf-8")

        assert main(["convert", "page.md", "--config", str(config), "--storage", "--dry-run"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert out.startswith('<ac:structured-macro ac:name="toc">')
        assert '<ac:parameter ac:name="title">Checklist</ac:parameter>' in out

    def test_discovered_config(self, page: Path, tmp_path: Path, capsys) -> None:
        """Test that a config file in the working directory is picked up."""
        (tmp_path / ".doc2conf.yaml").write_text("instance_type: server\n", encoding="utf-8")

        assert main(["convert", "page.md", "--dry-run"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.startswith("<h1>")

    def test_flag_overrides_config(self, page: Path, tmp_path: Path, capsys) -> None:
        """Test that command-line flags beat the config file."""
        (tmp_path / ".doc2conf.json").write_text('{"instance_type": "server"}', encoding="utf-8")

        assert main(["convert", "page.md", "--dry-run", "--instance-type", "cloud"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["type"] == "doc"

    def test_invalid_config(self, page: Path, tmp_path: Path) -> None:
        """Test that an unparsable config file is a usage error."""
        config = tmp_path / "bad.toml"
        config.write_text("generate_toc = = true\n", encoding="utf-8")
        assert main(["convert", "page.md", "--config", str(config)]) == EXIT_USAGE_ERROR

    def test_non_table_storage_section(self, page: Path, tmp_path: Path) -> None:
        """Test that a scalar storage section is rejected."""
        config = tmp_path / "c.json"
        config.write_text('{"storage": 3}', encoding="utf-8")
        assert main(["convert", "page.md", "--config", str(config)]) == EXIT_USAGE_ERROR

    def test_load_config_errors(self, tmp_path: Path) -> None:
        """Test the loader's rejections."""
        with pytest.raises(argparse.ArgumentTypeError, match="does not exist"):
            load_config_file(tmp_path / "missing.toml")

        ini = tmp_path / "c.ini"
        ini.write_text("[x]", encoding="utf-8")
        with pytest.raises(argparse.ArgumentTypeError, match="Unsupported config file format"):
            load_config_file(ini)

        listing = tmp_path / "c.yaml"
        listing.write_text("- a\n", encoding="utf-8")
        with pytest.raises(argparse.ArgumentTypeError, match="mapping at root level"):
            load_config_file(listing)

    def test_find_config_in_parents(self, tmp_path: Path) -> None:
        """Test the upward search."""
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        config = tmp_path / ".doc2conf.toml"
        config.write_text("", encoding="utf-8")

        assert find_config_in_parents(nested, stop_dir=tmp_path) == config.resolve()
        assert find_config_in_parents(nested, stop_dir=nested) is None

    def test_no_config(self) -> None:
        """Test that nothing is loaded when no file exists."""
        assert load_config_with_priority() == {}


@pytest.mark.cli
@pytest.mark.unit
class TestOptionsBuilder:
    """Tests for flags generated from the options dataclass."""

    def test_generated_flags(self) -> None:
        """Test the flag names."""
        parser = create_parser()
        convert = parser._subparsers._group_actions[0].choices["convert"]
        flags = {option for action in convert._actions for option in action.option_strings}

        assert {"--toc", "--inline-cards", "--mentions", "--no-emoji", "--space", "--base-path"} <= flags
        assert {"--use-official-schema", "--macro-format", "--instance-type", "--local-ids"} <= flags
        assert "--upload-images" not in flags

    def test_unset_flags_are_not_mapped(self) -> None:
        """Test that only passed flags are returned."""
        args, builder = _parse("page.md")
        assert builder.map_args_to_options(args) == {}

    def test_mapped_values(self) -> None:
        """Test flag to field mapping."""
        args, builder = _parse("page.md", "--toc", "--no-emoji", "--space", "DOCS", "--local-ids", "positional")
        assert builder.map_args_to_options(args) == {
            "generate_toc": True,
            "parse_emoji": False,
            "space_key": "DOCS",
            "local_ids": "positional",
        }

    def test_invalid_choice(self) -> None:
        """Test that argparse rejects unknown choices."""
        with pytest.raises(SystemExit):
            _parse("page.md", "--macro-format", "wiki")

    def test_resolve_options_precedence(self) -> None:
        """Test flags over environment over config."""
        config = {"space_key": "CFG", "instance_type": "server", "log_level": "INFO"}
        environ = {"DOC2CONF_SPACE": "ENV"}

        args, builder = _parse("page.md")
        options, _ = resolve_options(args, builder, config, environ)
        assert options.space_key == "ENV"
        assert options.instance_type == "server"

        args, builder = _parse("page.md", "--space", "FLAG")
        options, _ = resolve_options(args, builder, config, environ)
        assert options.space_key == "FLAG"


@pytest.mark.cli
@pytest.mark.unit
class TestPrintOutput:
    """Tests for printed output."""

    def test_plain_output_ends_with_newline(self) -> None:
        """Test plain printing."""
        stream = io.StringIO()
        print_output("{}", stream=stream)
        assert stream.getvalue() == "{}\n"

    def test_rich_missing(self, monkeypatch) -> None:
        """Test the rich dependency check."""
        monkeypatch.setattr("doc2conf.cli.output.check_rich_available", lambda: False)
        with pytest.raises(DependencyError):
            print_output("{}", use_rich=True, stream=io.StringIO())
