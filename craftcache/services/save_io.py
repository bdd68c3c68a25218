"""Browser save import/export.

The save format is what the game keeps in localStorage:
{"elements": [{"text": "Water", "emoji": "💧", "discovered": false}, ...]}
"""
import json
import logging
from typing import Dict, List, Optional, Tuple

from ..errors import CraftError, ElementMismatch
from . import element_store
from .pair_key import validate_name

logger = logging.getLogger(__name__)


def parse_save(payload) -> List[Tuple[str, str]]:
    elements = payload.get("elements") if isinstance(payload, dict) else None
    if not isinstance(elements, list):
        raise CraftError("E_BAD_SAVE", "save has no 'elements' list")
    out = []
    for raw in elements:
        if not isinstance(raw, dict):
            raise CraftError("E_BAD_SAVE", f"save element is not an object: {raw!r}")
        name = validate_name(raw.get("text"))
        icon = raw.get("emoji") or ""
        out.append((name, str(icon)))
    return out


def load_save(path: str) -> List[Tuple[str, str]]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_save(json.load(f))


def merge_elements(entries: List[Tuple[str, str]]) -> Dict[str, int]:
    """Insert every absent element in one transaction.

    Nothing is written if any icon disagrees or the store fails part way.
    """
    seen: Dict[str, str] = {}
    for name, icon in entries:
        known = seen.get(name)
        if known is None:
            stored = element_store.get(name)
            known = stored.icon if stored is not None else icon
        if known != icon:
            raise ElementMismatch(
                f"element {name!r} has icon {known!r}, save has {icon!r}"
            )
        seen[name] = known

    inserted = len(element_store.insert_all_if_absent(seen.items()))
    logger.info("merge_elements inserted=%s existing=%s", inserted, len(seen) - inserted)
    return {"inserted": inserted, "existing": len(seen) - inserted}


def export_save(path: Optional[str] = None) -> dict:
    payload = {
        "elements": [
            {"text": e.name, "emoji": e.icon, "discovered": False}
            for e in element_store.list_elements()
        ]
    }
    if path:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, separators=(",", ":"))
    return payload
