import json
import os
import sys

import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
import cli
from db import TrainingRepository


class TestCli:
    def test_calc_one_rm(self, capsys):
        cli.main(["calc-1rm", "--weight", "100", "--reps", "5", "--formula", "epley"])
        data = json.loads(capsys.readouterr().out)
        assert data["oneRM"] == 116.67
        assert data["targetWeight"] == 93.33
        assert data["targetReps"] == 5
        assert data["sets"][0] == {"reps": 5, "kg": 93.33}

    def test_demo_and_analytics(self, tmp_path, capsys):
        db = str(tmp_path / "t.db")
        cli.main(["demo", "--db", db])
        assert "Demo data inserted" in capsys.readouterr().out
        cli.main(["demo", "--db", db])
        assert "already contains" in capsys.readouterr().out
        assert len(TrainingRepository(db).fetch_all()) == 3

        data = cli.profile_analytics(db, None, "en")
        assert data["profile"]["totalWorkouts"] == 3
        # one record per exercise, so nothing to compare against
        assert data["progress"]["mostImprovedExercise"] == ""
        assert "bmi" not in data["profile"]
        assert data["recommendations"][0] == "📅 Train 3-4 times a week for better results."

    def test_backup_and_restore(self, tmp_path):
        db = str(tmp_path / "t.db")
        backup = str(tmp_path / "b.db")
        cli.main(["demo", "--db", db])
        cli.backup_db(db, backup)
        os.remove(db)
        cli.restore_db(backup, db)
        assert len(TrainingRepository(db).fetch_all()) == 3

    def test_migrate_fresh_database(self, tmp_path, capsys):
        cli.main(["migrate", "--db", str(tmp_path / "t.db")])
        assert "Nothing to migrate" in capsys.readouterr().out

    def test_settings_show_and_update(self, tmp_path, capsys):
        db = str(tmp_path / "t.db")
        yaml_path = str(tmp_path / "settings.yaml")
        cli.main(["settings", "--db", db, "--yaml", yaml_path])
        data = json.loads(capsys.readouterr().out)
        assert data["default_formula"] == "brzycki"
        assert data["page_size"] == 20

        cli.main(["settings", "--db", db, "--yaml", yaml_path, "default_formula", "epley"])
        assert json.loads(capsys.readouterr().out) == {"default_formula": "epley"}
        assert cli.settings_command(db, yaml_path, "default_formula") == {
            "default_formula": "epley"
        }

    def test_settings_rejects_invalid_value(self, tmp_path, capsys):
        args = ["settings", "--db", str(tmp_path / "t.db"), "--yaml", str(tmp_path / "s.yaml")]
        with pytest.raises(SystemExit):
            cli.main(args + ["page_size", "0"])
        assert "page_size" in capsys.readouterr().err
        with pytest.raises(SystemExit):
            cli.main(args + ["theme", "dark"])
        assert cli.settings_command(str(tmp_path / "t.db"), str(tmp_path / "s.yaml"))["page_size"] == 20
