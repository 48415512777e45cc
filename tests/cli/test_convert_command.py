"""
Tests for the `convert` CLI command.

Verifies:
1. Single component to stdout and to a file.
2. Directory conversion (flat and recursive) with skipped directories.
3. Exit codes for missing inputs, bad options and failed conversions.
"""

import pytest

from vue_switcheroo import __version__
from vue_switcheroo.cli.__main__ import main
from vue_switcheroo.cli.commands import discover_components
from vue_switcheroo.utils.console import set_verbose

COMPONENT = """<template>
  <p>{{ count }}</p>
</template>
<script>
export default {
  data() {
    return { count: 0 };
  },
}
</script>
"""

BROKEN = "<template><p>x</p></template>\n<script>\nexport default {}\n"


def _write(path, text=COMPONENT):
  path.parent.mkdir(parents=True, exist_ok=True)
  path.write_text(text, encoding="utf-8")
  return path


def test_single_file_to_stdout(tmp_path, capsys, recording_console):
  source = _write(tmp_path / "Counter.vue")

  assert main(["convert", str(source)]) == 0

  out = capsys.readouterr().out
  assert "<script setup>" in out
  assert "const count = ref(0);" in out


def test_single_file_to_output(tmp_path, recording_console):
  source = _write(tmp_path / "Counter.vue")
  target = tmp_path / "out" / "Counter.vue"

  assert main(["convert", str(source), "--out", str(target)]) == 0

  assert "import { ref } from 'vue';" in target.read_text(encoding="utf-8")
  assert "Converted:" in recording_console.export_text()


def test_missing_input(tmp_path, recording_console):
  assert main(["convert", str(tmp_path / "Nope.vue")]) == 1
  assert "Input not found" in recording_console.export_text()


def test_directory_requires_out(tmp_path, recording_console):
  _write(tmp_path / "A.vue")

  assert main(["convert", str(tmp_path)]) == 1
  assert "requires --out" in recording_console.export_text()


def test_empty_directory(tmp_path, recording_console):
  assert main(["convert", str(tmp_path), "--out", str(tmp_path / "out")]) == 1
  assert "No .vue files found" in recording_console.export_text()


def test_directory_conversion(tmp_path, recording_console):
  src = tmp_path / "src"
  _write(src / "A.vue")
  _write(src / "B.vue")
  _write(src / "nested" / "C.vue")
  out = tmp_path / "out"

  assert main(["convert", str(src), "--out", str(out)]) == 0

  assert (out / "A.vue").exists()
  assert (out / "B.vue").exists()
  assert not (out / "nested" / "C.vue").exists()
  assert "Batch Complete: 2/2" in recording_console.export_text()


def test_recursive_directory_conversion(tmp_path, recording_console):
  src = tmp_path / "src"
  _write(src / "A.vue")
  _write(src / "nested" / "C.vue")
  _write(src / "node_modules" / "lib" / "D.vue")
  out = tmp_path / "out"

  assert main(["convert", str(src), "--out", str(out), "--recursive"]) == 0

  assert (out / "nested" / "C.vue").exists()
  assert not (out / "node_modules").exists()


def test_discover_components_skips_build_output(tmp_path):
  _write(tmp_path / "A.vue")
  _write(tmp_path / "dist" / "B.vue")
  _write(tmp_path / ".git" / "C.vue")
  _write(tmp_path / "pages" / "D.vue")
  (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

  assert discover_components(tmp_path, recursive=True) == [tmp_path / "A.vue", tmp_path / "pages" / "D.vue"]
  assert discover_components(tmp_path, recursive=False) == [tmp_path / "A.vue"]


def test_partial_batch_failure_reports(tmp_path, recording_console):
  src = tmp_path / "src"
  _write(src / "Good.vue")
  _write(src / "Bad.vue", BROKEN)
  out = tmp_path / "out"

  assert main(["convert", str(src), "--out", str(out)]) == 0

  text = recording_console.export_text()
  assert "Conversion Report" in text
  assert "Bad.vue" in text
  assert "1 Converted, 1 Failed" in text
  assert not (out / "Bad.vue").exists()


def test_failed_single_conversion(tmp_path, recording_console):
  source = _write(tmp_path / "Bad.vue", BROKEN)

  assert main(["convert", str(source)]) == 1
  assert "Unclosed <script>" in recording_console.export_text()


def test_invalid_config_file(tmp_path, recording_console):
  source = _write(tmp_path / "Counter.vue")
  config = tmp_path / "switcheroo.toml"
  config.write_text("not_an_option = true\n", encoding="utf-8")

  assert main(["convert", str(source), "--config", str(config)]) == 1
  assert "Could not load options" in recording_console.export_text()


def test_config_disables_units(tmp_path, capsys, recording_console):
  source = _write(tmp_path / "Pic.vue", '<template><img src="~/assets/a.png"></template>\n')
  config = tmp_path / "switcheroo.toml"
  config.write_text("enable_asset_transforms = false\n", encoding="utf-8")

  assert main(["convert", str(source), "--config", str(config)]) == 0
  assert '<img src="~/assets/a.png">' in capsys.readouterr().out


def test_version(capsys):
  with pytest.raises(SystemExit) as excinfo:
    main(["--version"])

  assert excinfo.value.code == 0
  assert __version__ in capsys.readouterr().out


def test_verbose_logs_units(tmp_path, recording_console):
  source = _write(tmp_path / "Counter.vue")
  target = tmp_path / "out.vue"

  try:
    assert main(["--verbose", "convert", str(source), "--out", str(target)]) == 0
  finally:
    set_verbose(False)

  assert "Running transformer composition" in recording_console.export_text()
