import argparse
import json
import logging
import os
import shutil
import time

from algorithms import OneRMCalculator
from client import TrainingClient
from config import YamlConfig, env_or
from db import (
    Database,
    ExerciseRepository,
    ProfileRepository,
    SettingsRepository,
    TrainingRepository,
)
from localization import Translator
from migrate import migrate
from recommendation_service import RecommendationService
from schemas import OneRMRequest
from seed_sample_data import seed
from stats_service import StatisticsService

logger = logging.getLogger(__name__)


def backup_db(db_path: str, backup_path: str) -> None:
    Database(db_path).vacuum()
    shutil.copy(db_path, backup_path)
    logger.info("Backed up %s to %s", db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)
    logger.info("Restored %s from %s", db_path, backup_path)


def calc_one_rm(weight: float, reps: int, percentage: float, formula: str) -> dict:
    request = OneRMRequest(
        weight=weight, reps=reps, percentage=percentage, formula=formula
    )
    return OneRMCalculator.compute(request).model_dump(by_alias=True)


def profile_analytics(db_path: str, profile_id: int | None, language: str) -> dict:
    translator = Translator(language)
    profiles = ProfileRepository(db_path)
    service = StatisticsService(
        profiles,
        TrainingRepository(db_path),
        ExerciseRepository(db_path),
        recommender=RecommendationService(translator),
        translator=translator,
    )
    pid = profile_id or profiles.default_profile_id()
    result = service.analytics(pid)
    return result.model_dump(by_alias=True, exclude_none=True)


def settings_command(
    db_path: str, yaml_path: str, key: str | None = None, value: str | None = None
) -> dict:
    """Show all settings, one setting, or store ``value`` under ``key``."""
    repo = SettingsRepository(db_path, yaml_path)
    if key is not None and value is not None:
        repo.set_text(key, value)
        logger.info("Setting %s updated", key)
    data = repo.all_settings()
    if data.get("api_token"):
        data["api_token"] = "***"
    if key is not None:
        return {key: data.get(key)}
    return data


def benchmark(url: str, runs: int = 10, yaml_path: str = "settings.yaml") -> float:
    token = YamlConfig(yaml_path).load().get("api_token") or None
    client = TrainingClient(url, api_token=token)
    times: list[float] = []
    for _ in range(runs):
        t0 = time.time()
        client.health()
        times.append(time.time() - t0)
    avg = sum(times) / len(times)
    print(f"Average /health response time over {runs} runs: {avg:.4f}s")
    return avg


def serve(db_path: str, port: int | None) -> None:
    import uvicorn

    os.environ["TRAINING_DB"] = db_path
    from rest_api import api

    port = port or int(env_or("PORT", str(api.settings.get_int("port", 8080))))
    uvicorn.run(api.app, host="0.0.0.0", port=port)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Training tracker utilities")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="cmd", required=True)

    srv = sub.add_parser("serve")
    srv.add_argument("--db", default=env_or("TRAINING_DB", "training.db"))
    srv.add_argument("--port", type=int, default=None)

    calc = sub.add_parser("calc-1rm")
    calc.add_argument("--weight", type=float, required=True)
    calc.add_argument("--reps", type=int, required=True)
    calc.add_argument("--percentage", type=float, default=80.0)
    calc.add_argument(
        "--formula", choices=sorted(OneRMCalculator.formulas()), default=""
    )

    ana = sub.add_parser("analytics")
    ana.add_argument("--db", default="training.db")
    ana.add_argument("--profile", type=int, default=None)
    ana.add_argument(
        "--lang", choices=Translator().languages, default=Translator.DEFAULT_LANGUAGE
    )

    st = sub.add_parser("settings")
    st.add_argument("--db", default="training.db")
    st.add_argument("--yaml", default="settings.yaml")
    st.add_argument("key", nargs="?")
    st.add_argument("value", nargs="?")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default="training.db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default="training.db")

    demo = sub.add_parser("demo")
    demo.add_argument("--db", default="training.db")

    mig = sub.add_parser("migrate")
    mig.add_argument("--db", default="training.db")

    bench = sub.add_parser("benchmark")
    bench.add_argument("--url", default="http://localhost:8080")
    bench.add_argument("--runs", type=int, default=10)
    bench.add_argument("--yaml", default="settings.yaml")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    if args.cmd == "serve":
        serve(args.db, args.port)
    elif args.cmd == "calc-1rm":
        result = calc_one_rm(args.weight, args.reps, args.percentage, args.formula)
        print(json.dumps(result, ensure_ascii=False, indent=2))
    elif args.cmd == "analytics":
        result = profile_analytics(args.db, args.profile, args.lang)
        print(json.dumps(result, ensure_ascii=False, indent=2))
    elif args.cmd == "settings":
        try:
            result = settings_command(args.db, args.yaml, args.key, args.value)
        except ValueError as e:
            parser.error(str(e))
        print(json.dumps(result, ensure_ascii=False, indent=2))
    elif args.cmd == "backup":
        backup_db(args.db, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, args.db)
    elif args.cmd == "demo":
        if seed(args.db):
            print("Demo data inserted")
        else:
            print("Database already contains trainings")
    elif args.cmd == "migrate":
        steps = migrate(args.db)
        print("Applied: " + ", ".join(steps) if steps else "Nothing to migrate")
    elif args.cmd == "benchmark":
        benchmark(args.url, args.runs, args.yaml)


if __name__ == "__main__":
    main()
