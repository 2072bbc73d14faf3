# tests/test_build.py
"""Tests for compile_script.build."""

from pathlib import Path
from types import ModuleType

import pytest

import compile_script
import compile_script.build as mod_build
import compile_script.expand as mod_expand
from compile_script.types import CompileOptions
from tests.utils import import_lines, write_script


def make_options(src: Path, dest: Path, **overrides: object) -> CompileOptions:
    options: CompileOptions = {
        "input": src,
        "dest": dest,
        "target_shell": "bash",
        "force": False,
        "dry_run": False,
    }
    options.update(overrides)  # type: ignore[typeddict-item]
    return options


def test_package_exposes_build_module() -> None:
    assert isinstance(compile_script.build, ModuleType)
    assert compile_script.build is mod_build
    assert compile_script.assemble is mod_build.assemble


# --------------------------------------------------------------------------- #
# compute_dest
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(
    ("input_path", "output_name", "expected"),
    [
        ("build.sh", None, "dist/build.sh"),
        ("scripts/build.sh", None, "dist/build.sh"),
        ("build", None, "dist/build.sh"),
        ("build.sh", "tool", "dist/tool.sh"),
        ("build.sh", "tool.sh", "dist/tool.sh"),
        ("build.sh", "nested/tool.sh", "dist/tool.sh"),
        ("build.sh.sh", None, "dist/build.sh.sh"),
    ],
)
def test_compute_dest(
    tmp_path: Path,
    input_path: str,
    output_name: str | None,
    expected: str,
) -> None:
    dest = mod_build.compute_dest(input_path, output_name, base=tmp_path)

    assert dest == tmp_path / expected


def test_compute_dest_custom_out_dir(tmp_path: Path) -> None:
    dest = mod_build.compute_dest("a.sh", out_dir="build/bin", base=tmp_path)

    assert dest == tmp_path / "build" / "bin" / "a.sh"


def test_compute_dest_defaults_to_cwd(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.chdir(tmp_path)

    assert mod_build.compute_dest("a.sh") == tmp_path / "dist" / "a.sh"


# --------------------------------------------------------------------------- #
# scratch_file / collision
# --------------------------------------------------------------------------- #


def test_scratch_file_removed_on_success() -> None:
    with mod_build.scratch_file() as scratch:
        assert scratch.exists()
        assert scratch.name.startswith("compile-script.")
    assert not scratch.exists()


def test_scratch_file_removed_on_error() -> None:
    seen: list[Path] = []

    with pytest.raises(RuntimeError), mod_build.scratch_file() as scratch:
        seen.append(scratch)
        raise RuntimeError("boom")

    assert not seen[0].exists()


def test_check_collision(tmp_path: Path) -> None:
    # --- setup ---
    dest = tmp_path / "dist" / "a.sh"

    # --- execute and verify ---
    mod_build.check_collision(dest, force=False)  # nothing there yet

    dest.parent.mkdir()
    dest.write_text("old\n")
    mod_build.check_collision(dest, force=True)
    with pytest.raises(mod_build.DestinationExistsError) as e:
        mod_build.check_collision(dest, force=False)
    assert e.value.code == 1
    assert "-f" in str(e.value)


def test_check_collision_is_silent_when_missing(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    mod_build.check_collision(tmp_path / "none.sh", force=False)

    assert capsys.readouterr().out == ""


# --------------------------------------------------------------------------- #
# assemble
# --------------------------------------------------------------------------- #


def test_assemble_writes_header_and_body(tmp_path: Path) -> None:
    # --- setup ---
    write_script(tmp_path, "lib/a.sh", "a=1")
    root = write_script(
        tmp_path, "main.sh", "#!/bin/sh", *import_lines("lib/a.sh"), "echo $a"
    )
    dest = tmp_path / "dist" / "main.sh"

    # --- execute ---
    result = mod_build.assemble(root, "zsh", dest=dest)

    # --- verify ---
    assert result == dest
    assert dest.read_text().splitlines() == [
        "#!/usr/bin/env zsh",
        mod_expand.boundary("START", "lib/a.sh"),
        "a=1",
        mod_expand.boundary("END", "lib/a.sh"),
        "echo $a",
    ]


def test_assemble_without_imports_keeps_content(tmp_path: Path) -> None:
    # --- setup ---
    body = ["set -eu", 'name="${1:-world}"', 'echo "hi $name"']
    root = write_script(tmp_path, "plain.sh", "#!/bin/bash", *body)
    dest = tmp_path / "out.sh"

    # --- execute ---
    mod_build.assemble(root, dest=dest)

    # --- verify ---
    assert dest.read_text().splitlines() == ["#!/usr/bin/env bash", *body]


def test_assemble_copies_plain_bytes_unchanged(tmp_path: Path) -> None:
    # --- setup ---
    body = b"echo 'a\x0cb'\necho 'c\xe2\x80\xa8d'\n# caf\xe9\ny=2\r\n"
    root = tmp_path / "main.sh"
    root.write_bytes(b"#!/bin/sh\n" + body)
    dest = tmp_path / "out.sh"

    # --- execute ---
    mod_build.assemble(root, dest=dest)

    # --- verify ---
    assert dest.read_bytes() == b"#!/usr/bin/env bash\n" + body


def test_recompile_is_stable_apart_from_header(tmp_path: Path) -> None:
    # --- setup ---
    root = write_script(tmp_path, "plain.sh", "#!/bin/sh", "", "echo one", "echo two")
    first = tmp_path / "dist" / "plain.sh"
    mod_build.assemble(root, "sh", dest=first)
    first_text = first.read_text()

    # --- execute ---
    mod_build.run_compile(
        make_options(first, first, target_shell="dash", force=True)
    )

    # --- verify ---
    second_lines = first.read_text().splitlines()
    assert second_lines[0] == "#!/usr/bin/env dash"
    assert second_lines[1:] == first_text.splitlines()[1:]


def test_assemble_failure_writes_nothing(tmp_path: Path) -> None:
    # --- setup ---
    root = write_script(tmp_path, "main.sh", "x=1", *import_lines("missing.sh"))
    dest = tmp_path / "dist" / "main.sh"

    # --- execute ---
    with pytest.raises(mod_expand.IncludeError):
        mod_build.assemble(root, dest=dest)

    # --- verify ---
    assert not dest.exists()
    assert not dest.parent.exists()


def test_assemble_failure_keeps_previous_output(tmp_path: Path) -> None:
    root = write_script(tmp_path, "main.sh", *import_lines("missing.sh"))
    dest = tmp_path / "main.out.sh"
    dest.write_text("previous\n")

    with pytest.raises(mod_expand.IncludeError):
        mod_build.assemble(root, dest=dest)

    assert dest.read_text() == "previous\n"


def test_assemble_cleans_scratch_on_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # --- setup ---
    monkeypatch.setattr(mod_build.tempfile, "tempdir", str(tmp_path))
    root = write_script(tmp_path, "main.sh", *import_lines("missing.sh"))

    # --- execute ---
    with pytest.raises(mod_expand.IncludeError):
        mod_build.assemble(root, dest=tmp_path / "out.sh")

    # --- verify ---
    assert list(tmp_path.glob("compile-script.*")) == []


def test_assemble_dry_run_does_not_write(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    root = write_script(tmp_path, "main.sh", "x=1")
    dest = tmp_path / "dist" / "main.sh"

    mod_build.assemble(root, dest=dest, dry_run=True)

    assert not dest.exists()
    assert "Would write" in capsys.readouterr().out


# --------------------------------------------------------------------------- #
# run_compile
# --------------------------------------------------------------------------- #


def test_run_compile_reports_inlined_count(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    # --- setup ---
    write_script(tmp_path, "a.sh", "a=1")
    write_script(tmp_path, "b.sh", *import_lines("a.sh"), "b=1")
    root = write_script(
        tmp_path, "main.sh", *import_lines("a.sh"), *import_lines("b.sh")
    )
    dest = tmp_path / "dist" / "main.sh"

    # --- execute ---
    result = mod_build.run_compile(make_options(root, dest))

    # --- verify ---
    assert result == dest
    assert dest.exists()
    assert "2 files inlined" in capsys.readouterr().out


def test_run_compile_refuses_existing_dest(tmp_path: Path) -> None:
    # --- setup ---
    root = write_script(tmp_path, "main.sh", "x=1")
    dest = tmp_path / "dist" / "main.sh"
    dest.parent.mkdir()
    dest.write_text("old\n")

    # --- execute ---
    with pytest.raises(mod_build.DestinationExistsError):
        mod_build.run_compile(make_options(root, dest))

    # --- verify ---
    assert dest.read_text() == "old\n"


def test_run_compile_validates_input(tmp_path: Path) -> None:
    from compile_script.validate import PathValidationError

    with pytest.raises(PathValidationError) as e:
        mod_build.run_compile(
            make_options(tmp_path / "nope.sh", tmp_path / "dist" / "nope.sh")
        )

    assert e.value.code == 10
