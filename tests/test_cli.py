import json
import logging

import pytest

from simmer import __version__
from simmer.cli import main


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


@pytest.fixture()
def run_cli(tmp_path, capsys):
    def run(*args):
        code = main(["--save-dir", str(tmp_path / "saves"), *args])
        out, err = capsys.readouterr()
        return code, out, err

    return run


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_recipes_lists_catalog(run_cli):
    code, out, _ = run_cli("recipes", "--stars", "3")
    assert code == 0
    listed = json.loads(out)
    assert [r["id"] for r in listed] == ["egg_fried_rice", "garden_omelette"]
    assert all(r["stars"] == 3 for r in listed)


def test_status_of_fresh_player(run_cli):
    code, out, _ = run_cli("status")
    assert code == 0
    status = json.loads(out)
    assert status["energy"] == 100
    assert status["cooking"] is None
    assert status["inventory"]["egg"] == 50


def test_cook_persists_across_invocations(run_cli, tmp_path):
    code, out, _ = run_cli("cook", "boiled_egg")
    assert code == 0
    assert json.loads(out)["started"] is True
    assert (tmp_path / "saves" / "playerdata.json").exists()

    code, out, _ = run_cli("status")
    status = json.loads(out)
    assert status["cooking"] == "boiled_egg"
    assert status["cooking_remaining_seconds"] == 10.0
    assert status["energy"] == 90
    assert status["inventory"]["egg"] == 49

    code, out, _ = run_cli("cook", "steamed_rice")
    assert code == 1
    assert json.loads(out)["reason"] == "busy"


def test_unknown_recipe_reports_error(run_cli):
    code, out, err = run_cli("cook", "pizza")
    assert code == 2
    assert out == ""
    assert "pizza" in err


def test_bad_settings_file_reports_error(run_cli, tmp_path):
    bad = tmp_path / "settings.yaml"
    bad.write_text("graphics:\n  width: 1\n", encoding="utf-8")
    code, _, err = run_cli("--settings", str(bad), "status")
    assert code == 2
    assert "graphics" in err


def test_run_steps_the_simulation(run_cli):
    code, out, _ = run_cli("run", "--steps", "6", "--dt", "1.0", "--tick-rate", "0")
    assert code == 0
    status = json.loads(out)
    assert status["energy"] == 100
    assert status["regen_accumulator"] == 1.0
