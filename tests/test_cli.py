"""Tests for the command-line interface.

WHY: Build systems depend on the CLI's exit codes and default output
naming. These tests pin both down for every error category.

HOW: The pipeline factory inside gfx2o.cli is patched to inject a
RecordingRunner, so the whole CLI runs without a real toolchain. Each
test chdirs into tmp_path so relative paths anchor predictably.
"""

from pathlib import Path

import pytest

from gfx2o import cli
from gfx2o.pipeline import Gfx2oPipeline


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def patched_pipeline(monkeypatch, workdir, toolchain_config, runner_factory):
    """Patch the CLI's pipeline; returns a setter for the runner to use."""
    state = {"runner": runner_factory()}

    def _factory():
        return Gfx2oPipeline(toolchain_config, state["runner"], cwd=workdir)

    monkeypatch.setattr(cli, "Gfx2oPipeline", _factory)
    return state


def _exit_code(argv):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(argv)
    return exc_info.value.code


class TestHelp:
    def test_no_arguments_prints_usage(self, capsys):
        cli.main([])
        out = capsys.readouterr().out
        assert "usage: gfx2o" in out
        assert "<name>.<form>.<outputs>.png" in out

    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help_flags_exit_zero(self, flag, capsys):
        assert _exit_code([flag]) == 0
        assert "usage: gfx2o" in capsys.readouterr().out


class TestUsageErrors:
    def test_stdin_rejected(self, capsys):
        assert _exit_code(["-"]) == cli.EXIT_USAGE
        assert "standard input" in capsys.readouterr().err

    def test_non_png_rejected(self, workdir):
        (workdir / "hero.8t.i.bmp").write_bytes(b"")
        assert _exit_code(["hero.8t.i.bmp"]) == cli.EXIT_USAGE

    def test_uppercase_png_suffix_rejected(self, workdir, make_asset):
        make_asset("data/hero.8t.i.PNG")
        assert _exit_code(["data/hero.8t.i.PNG"]) == cli.EXIT_USAGE

    def test_missing_input_file(self, workdir):
        assert _exit_code(["data/nothing.8t.i.png"]) == cli.EXIT_USAGE

    def test_missing_output_directory(self, workdir, make_asset):
        make_asset("data/hero.8t.i.png")
        assert _exit_code(["data/hero.8t.i.png", "no/such/dir/out.o"]) == cli.EXIT_USAGE

    def test_too_many_arguments(self, capsys):
        assert _exit_code(["a.8t.i.png", "a.o", "extra"]) == cli.EXIT_METADATA
        assert "Too many arguments" in capsys.readouterr().err

    def test_unanchored_path(self, tmp_path, monkeypatch, patched_pipeline, make_asset):
        make_asset("elsewhere/x.8b.i.png")
        work = tmp_path / "work"
        work.mkdir()
        monkeypatch.chdir(work)
        monkeypatch.setattr(
            cli,
            "Gfx2oPipeline",
            lambda: Gfx2oPipeline(runner=patched_pipeline["runner"], cwd=work),
        )
        assert _exit_code([str(tmp_path / "elsewhere" / "x.8b.i.png")]) == cli.EXIT_USAGE
        assert patched_pipeline["runner"].calls == []


class TestMetadataErrors:
    @pytest.mark.parametrize(
        "name,kind",
        [
            ("foo.png", "too_few_segments"),
            ("9b.i.png", "invalid_bit_depth"),
            ("8x.i.png", "invalid_form"),
            ("8t.iz.png", "invalid_output_selector"),
        ],
    )
    def test_exit_127_with_kind(self, name, kind, workdir, patched_pipeline, capsys):
        (workdir / name).write_bytes(b"")
        assert _exit_code([name]) == cli.EXIT_METADATA
        assert kind in capsys.readouterr().err
        assert patched_pipeline["runner"].calls == []


class TestConversion:
    def test_default_output_path(self, workdir, make_asset, patched_pipeline, capsys):
        make_asset("data/sprites/hero.8t.iml64.png")

        cli.main(["data/sprites/hero.8t.iml64.png"])

        assert (workdir / "data" / "sprites" / "hero.o").is_file()
        err = capsys.readouterr().err
        assert "sprites_hero_gfx" in err
        assert patched_pipeline["runner"].executables == [
            "grit", "bin2asm", "bin2asm", "bin2asm", "arm-none-eabi-as",
        ]

    def test_explicit_output_path(self, workdir, make_asset, patched_pipeline):
        make_asset("data/bg/sky.4t.imp.png")
        (workdir / "build").mkdir()

        cli.main(["data/bg/sky.4t.imp.png", "build/sky.o"])

        assert (workdir / "build" / "sky.o").is_file()
        assert not (workdir / "data" / "bg" / "sky.o").exists()

    def test_tool_failure_exit_code(self, workdir, make_asset, patched_pipeline, runner_factory, capsys):
        make_asset("data/sprites/hero.8t.iml64.png")
        patched_pipeline["runner"] = runner_factory(fail_on=["grit"])

        assert _exit_code(["data/sprites/hero.8t.iml64.png"]) == cli.EXIT_TOOL_FAILURE

        assert not (workdir / "data" / "sprites" / "hero.o").exists()
        assert "grit failed" in capsys.readouterr().err
        assert patched_pipeline["runner"].executables == ["grit"]


class TestDefaultOutputPath:
    def test_strips_every_extension(self):
        assert cli.default_output_path(Path("data/sprites/hero.8t.iml64.png")) == Path(
            "data/sprites/hero.o"
        )

    def test_bare_name(self):
        assert cli.default_output_path(Path("tiles.4t.i.png")) == Path("tiles.o")


class TestParser:
    def test_optional_output(self):
        args = cli.build_parser().parse_args(["in.8t.i.png"])
        assert args.input_file == "in.8t.i.png"
        assert args.output_file is None
        assert args.verbose is False

    def test_verbose_flag(self):
        args = cli.build_parser().parse_args(["-v", "in.8t.i.png", "out.o"])
        assert args.verbose is True
        assert args.output_file == "out.o"
