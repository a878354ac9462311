#!/usr/bin/env python3
import json
from pathlib import Path

SCHEMA_VERSION = "1.0.0"


def main() -> None:
    # Resolve repo root as parent of this script directory
    script_path = Path(__file__).resolve()
    repo_root = script_path.parent.parent
    defs_dir = repo_root / "dynadiag" / "checks" / "defs"
    index_path = defs_dir / "index.json"

    if not defs_dir.is_dir():
        raise SystemExit(f"Expected check definitions at {defs_dir}, but it does not exist.")

    suites = {}
    if index_path.exists():
        suites = json.loads(index_path.read_text(encoding="utf-8")).get("suites", {})

    checks = []

    for path in sorted(defs_dir.glob("*.json")):
        # Skip the index file itself
        if path.name == "index.json":
            continue

        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Failed to parse {path}: {e}")

        check_id = data.get("id")
        category_id = data.get("category_id")

        if not check_id:
            raise SystemExit(f"File {path} is missing required field 'id'.")
        if not category_id:
            raise SystemExit(f"File {path} is missing required field 'category_id'.")

        checks.append(
            {
                "id": check_id,
                "category_id": category_id,
                "filename": path.name,
            }
        )

    # Sort checks by category then id for stable diffs
    checks.sort(key=lambda c: (c["category_id"], c["id"]))

    known = {c["id"] for c in checks}
    for suite_id, members in suites.items():
        missing = [cid for cid in members if cid not in known]
        if missing:
            raise SystemExit(f"Suite {suite_id!r} references unknown checks: {missing}")

    index = {
        "schema_version": SCHEMA_VERSION,
        "generated": "scripts/build_index.py",
        "checks": checks,
        # Suite order is evaluation order; kept exactly as written
        "suites": suites,
    }

    with index_path.open("w", encoding="utf-8") as f:
        json.dump(index, f, indent=2)
        f.write("\n")

    print(f"Wrote {index_path} with {len(checks)} checks and {len(suites)} suites.")


if __name__ == "__main__":
    main()
