# craft_cli.py: combination cache CLI
import argparse
import json
import logging
import random
import sys
from typing import List

from craftcache import create_app
from craftcache.config import EXPLORE_DELAY_SECONDS, GENERATOR_BASE_URL
from craftcache.errors import CraftError
from craftcache.models import db
from craftcache.services import element_store, pair_cache, save_io
from craftcache.services.combination import CombinationService
from craftcache.services.explorer import explore
from craftcache.services.generator import HttpPairGenerator

logger = logging.getLogger("craft_cli")


def print_rows(rows: List[tuple], headers: List[str]) -> None:
    if not rows:
        print("(no rows)")
        return
    widths = [len(h) for h in headers]
    for r in rows:
        for i, v in enumerate(r):
            widths[i] = max(widths[i], len("" if v is None else str(v)))
    line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    print(line)
    print("-+-".join("-" * w for w in widths))
    for r in rows:
        print(" | ".join(("" if v is None else str(v)).ljust(widths[i]) for i, v in enumerate(r)))


def _service(args) -> CombinationService:
    return CombinationService(HttpPairGenerator(base_url=args.base_url))


# --------------------
# Commands
# --------------------

def cmd_init(args):
    db.create_all()
    print(json.dumps({"ok": True}, indent=2))


def cmd_seed(args):
    created = element_store.seed()
    print(json.dumps({"ok": True, "created": created}, indent=2))


def cmd_combine(args):
    service = _service(args)
    try:
        outcome = service.combine(args.first, args.second)
    finally:
        service.compute.close()
    print(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False))


def cmd_explore(args):
    service = _service(args)
    rng = random.Random(args.seed) if args.seed is not None else None
    try:
        summary = explore(service, steps=args.steps, rng=rng, delay=args.delay)
    finally:
        service.compute.close()
    print(json.dumps(summary.to_dict(), indent=2))


def cmd_import_save(args):
    counts = save_io.merge_elements(save_io.load_save(args.path))
    print(json.dumps({"ok": True, **counts}, indent=2))


def cmd_export_save(args):
    payload = save_io.export_save(args.out)
    print(json.dumps({"ok": True, "path": args.out, "count": len(payload["elements"])}, indent=2))


def cmd_stats(args):
    payload = {"elements": element_store.count(), **pair_cache.stats()}
    payload["dangling_results"] = len(pair_cache.dangling_results())
    print(json.dumps(payload, indent=2))


def cmd_elements(args):
    rows = [(e.name, e.icon, e.created_at) for e in element_store.list_elements(args.like)]
    print_rows(rows, ["name", "icon", "created_at"])


def cmd_pairs(args):
    rows = [(p.left, p.right, p.result) for p in pair_cache.list_pairs(args.element)]
    print_rows(rows, ["left", "right", "result"])


def build_parser():
    p = argparse.ArgumentParser(description="Combination cache CLI")
    p.add_argument("--base-url", default=GENERATOR_BASE_URL, help="Pair generator base URL")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("init", help="Create tables")
    s.set_defaults(func=cmd_init)

    s = sub.add_parser("seed", help="Insert the starter elements")
    s.set_defaults(func=cmd_seed)

    s = sub.add_parser("combine", help="Combine two elements (JSON)")
    s.add_argument("first")
    s.add_argument("second")
    s.set_defaults(func=cmd_combine)

    s = sub.add_parser("explore", help="Combine random uncached pairs")
    s.add_argument("--steps", type=int, default=None, help="Stop after N computed pairs")
    s.add_argument("--delay", type=float, default=EXPLORE_DELAY_SECONDS, help="Seconds to wait between requests")
    s.add_argument("--seed", type=int, default=None, help="Random seed")
    s.set_defaults(func=cmd_explore)

    s = sub.add_parser("import-save", help="Merge a browser save file into the element store")
    s.add_argument("path")
    s.set_defaults(func=cmd_import_save)

    s = sub.add_parser("export-save", help="Write the element store in browser save format")
    s.add_argument("--out", default="serialized_for_page.json")
    s.set_defaults(func=cmd_export_save)

    s = sub.add_parser("stats", help="Element and pair counts")
    s.set_defaults(func=cmd_stats)

    s = sub.add_parser("elements", help="List elements")
    s.add_argument("--like", help="Filter by name contains")
    s.set_defaults(func=cmd_elements)

    s = sub.add_parser("pairs", help="List cached pairs")
    s.add_argument("--element", help="Only pairs that use or produce this element")
    s.set_defaults(func=cmd_pairs)

    return p


def main(argv=None, app=None):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    app = app or create_app()
    with app.app_context():
        try:
            args.func(args)
        except CraftError as e:
            print(json.dumps({"ok": False, "error": e.code, "detail": e.message}, indent=2, ensure_ascii=False))
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
