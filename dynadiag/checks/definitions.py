# dynadiag/checks/definitions.py

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import json


@dataclass(frozen=True)
class CheckDefinition:
    """
    Lightweight wrapper around a check JSON file.

    We keep the raw dict so that check specific settings
    (for example known_app_zones) can be read without changing this class.
    """
    id: str
    name: str
    step: str
    category_id: str
    fixable: bool
    fix_detail: Optional[str]
    tags: Tuple[str, ...]
    description: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CheckDefinition":
        cid = data.get("id")
        if not cid:
            raise ValueError("Check definition missing 'id' field")

        name = data.get("name", cid)
        return cls(
            id=cid,
            name=name,
            step=data.get("step", name),
            category_id=data.get("category_id", "general"),
            fixable=bool(data.get("fixable", False)),
            fix_detail=data.get("fix_detail"),
            tags=tuple(data.get("tags", [])),
            description=data.get("description"),
            raw=data,
        )


def _default_defs_dir() -> Path:
    """
    Resolve the defs/ directory shipped next to this file.

    Layout:
      dynadiag/checks/
        definitions.py
        defs/
          index.json
          <check_id>.json
    """
    return Path(__file__).resolve().parent / "defs"


def load_check_definition(path: Path) -> CheckDefinition:
    data = json.loads(path.read_text(encoding="utf-8"))
    # If JSON does not have id, fall back to filename stem
    if "id" not in data:
        data["id"] = path.stem
    return CheckDefinition.from_dict(data)


def load_all_check_definitions(defs_dir: Path | None = None) -> List[CheckDefinition]:
    """Load all defs/*.json except index.json."""
    if defs_dir is None:
        defs_dir = _default_defs_dir()

    if not defs_dir.exists():
        raise FileNotFoundError(f"Check definitions directory not found: {defs_dir}")

    defs: List[CheckDefinition] = []
    for p in sorted(defs_dir.glob("*.json")):
        if p.name.lower() == "index.json":
            continue
        defs.append(load_check_definition(p))
    return defs


@lru_cache(maxsize=None)
def _builtin_definitions() -> Dict[str, CheckDefinition]:
    return {d.id: d for d in load_all_check_definitions()}


def get_check_definition(check_id: str) -> CheckDefinition:
    try:
        return _builtin_definitions()[check_id]
    except KeyError:
        raise KeyError(f"Unknown check id: {check_id!r}")


def find_check_definition(check_id: str) -> Optional[CheckDefinition]:
    return _builtin_definitions().get(check_id)


def load_suite(suite_id: str, defs_dir: Path | None = None) -> List[CheckDefinition]:
    """
    Return the ordered check definitions of a suite declared in index.json.

    Order in index.json is the evaluation order shown to the user.
    """
    if defs_dir is None:
        defs_dir = _default_defs_dir()
        lookup = _builtin_definitions()
    else:
        lookup = {d.id: d for d in load_all_check_definitions(defs_dir)}

    index = json.loads((defs_dir / "index.json").read_text(encoding="utf-8"))
    suites = index.get("suites", {})
    if suite_id not in suites:
        raise KeyError(f"Unknown check suite: {suite_id!r}")

    out: List[CheckDefinition] = []
    for cid in suites[suite_id]:
        if cid not in lookup:
            raise KeyError(f"Suite {suite_id!r} references unknown check id: {cid!r}")
        out.append(lookup[cid])
    return out
