"""Console entry point: load a rating matrix and report top-N predictions.

Usage:
    python -m src.user_based.cli --ratings data/ratings_sample.csv --user 0 --top-n 3

Anything not given on the command line is taken from config.yaml, and the
ratings file, user and top-N are prompted for when still missing.
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Sequence

import pandas as pd
import yaml

from ..data import RatingsLoadError, load_rating_matrix
from ..paths import ProjectPaths, get_repo_root
from ..utils import setup_logging
from .recommender import Recommendation, RecommendRequest, recommend, similar_users
from .similarity import InvalidUserIndexError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendConfig:
    ratings_path: Path | None = None
    top_n: int | None = None
    log_level: str = "INFO"


def load_config(config_path: Path | None = None) -> RecommendConfig:
    """Read config.yaml; relative paths in it are resolved against its directory.

    With no explicit path the repo-root config.yaml is used when present.
    """
    if config_path is None:
        try:
            paths = ProjectPaths.from_repo_root(get_repo_root())
        except FileNotFoundError:
            return RecommendConfig()
        if not paths.config_path.is_file():
            return RecommendConfig()
    else:
        config_path = Path(config_path).resolve()
        if not config_path.is_file():
            raise FileNotFoundError(f"Config not found: {config_path}")
        paths = ProjectPaths.from_repo_root(config_path.parent, config_path=config_path.name)

    cfg_yaml = yaml.safe_load(paths.config_path.read_text())
    if cfg_yaml is None:
        cfg_yaml = {}
    if not isinstance(cfg_yaml, dict):
        raise ValueError(f"Expected config YAML to be a mapping, got: {type(cfg_yaml)}")

    ratings_cfg = cfg_yaml.get("ratings", {}) if isinstance(cfg_yaml.get("ratings"), dict) else {}
    rec_cfg = cfg_yaml.get("recommend", {}) if isinstance(cfg_yaml.get("recommend"), dict) else {}
    log_cfg = cfg_yaml.get("logging", {}) if isinstance(cfg_yaml.get("logging"), dict) else {}

    raw_path = ratings_cfg.get("path")
    top_n = rec_cfg.get("top_n")
    return RecommendConfig(
        ratings_path=(paths.resolve(str(raw_path)) if raw_path else None),
        top_n=(int(top_n) if top_n is not None else None),
        log_level=str(log_cfg.get("level", "INFO")),
    )


def format_report(recs: Sequence[Recommendation], *, user_index: int, top_n: int) -> str:
    """Human-readable report; users and movies are numbered from 1."""
    lines = [f"\nTop {top_n} recommended movies for User {user_index + 1}:"]
    if not recs:
        lines.append("No recommendations found.")
    for rec in recs:
        lines.append(f"Movie {rec.item + 1} with predicted rating {rec.score:.2f}")
    return "\n".join(lines)


def _prompt_int(message: str) -> int:
    raw = input(message)
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"expected an integer, got {raw!r}") from exc


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="User-based collaborative filtering (cosine similarity)")
    p.add_argument("--ratings", type=Path, default=None, help="Comma-delimited user x item ratings file")
    p.add_argument("--user", type=int, default=None, help="Target user index (0-based unless --one-based)")
    p.add_argument("--top-n", type=int, default=None, help="How many recommendations to return")
    p.add_argument("--one-based", action="store_true", help="Interpret --user as 1-based")
    p.add_argument("--show-similar", type=int, default=0, help="Also list this many most similar users")
    p.add_argument("--config", type=Path, default=None, help="Path to config YAML (default: repo config.yaml)")
    p.add_argument("--log-level", type=str, default=None, help="Override logging level")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    try:
        cfg = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        setup_logging("INFO")
        logger.error("Invalid configuration: %s", exc)
        return 1
    setup_logging(args.log_level or cfg.log_level)

    base = "1-based" if args.one_based else "0-based"
    try:
        ratings_path = args.ratings or cfg.ratings_path
        if ratings_path is None:
            ratings_path = Path(input("Enter the filename of the ratings CSV: ").strip())
        user = args.user if args.user is not None else _prompt_int(f"Enter the target user index ({base}): ")
        top_n = args.top_n if args.top_n is not None else cfg.top_n
        if top_n is None:
            top_n = _prompt_int("Enter the number of top recommendations to display: ")
    except (ValueError, EOFError) as exc:
        logger.error("Invalid input: %s", exc)
        return 1

    user_index = user - 1 if args.one_based else user

    try:
        matrix = load_rating_matrix(ratings_path)
    except RatingsLoadError as exc:
        logger.error("Could not load ratings: %s", exc)
        return 1

    try:
        recs = recommend(RecommendRequest(matrix=matrix, user_index=user_index, top_n=top_n))
        sims = similar_users(matrix, user_index, top_n=args.show_similar) if args.show_similar > 0 else []
    except InvalidUserIndexError as exc:
        logger.error("Invalid user index: %s", exc)
        return 1
    except ValueError as exc:
        logger.error("Invalid request: %s", exc)
        return 1

    if sims:
        print("\n=== Similar Users ===")
        df_s = pd.DataFrame([asdict(s) for s in sims])
        df_s["user"] += 1
        print(df_s.to_string(index=False))

    print(format_report(recs, user_index=user_index, top_n=top_n))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
