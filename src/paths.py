from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProjectPaths:
    repo_root: Path
    config_path: Path

    @classmethod
    def from_repo_root(
        cls,
        repo_root: Path,
        *,
        config_path: Path | str = "config.yaml",
    ) -> "ProjectPaths":
        root = Path(repo_root).resolve()
        return cls(
            repo_root=root,
            config_path=_resolve(root, config_path),
        )

    def resolve(self, p: Path | str) -> Path:
        """Resolve `p` against the repo root unless it is already absolute."""
        return _resolve(self.repo_root, p)


def _resolve(root: Path, p: Path | str) -> Path:
    p_path = Path(p) if isinstance(p, str) else p
    if not p_path.is_absolute():
        p_path = root / p_path
    return p_path.resolve()


def get_repo_root() -> Path:
    """Return repo root by searching upwards for `config.yaml` or `.git`."""
    start = Path.cwd().resolve()
    if start.is_file():
        start = start.parent

    for candidate in (start, *start.parents):
        if (candidate / "config.yaml").is_file() or (candidate / ".git").exists():
            return candidate

    # Fallback: search upwards from this file (useful if called from elsewhere).
    start = Path(__file__).resolve().parent
    for candidate in (start, *start.parents):
        if (candidate / "config.yaml").is_file() or (candidate / ".git").exists():
            return candidate

    raise FileNotFoundError("Could not locate repo root (expected `config.yaml` or `.git`).")
