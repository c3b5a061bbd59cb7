"""One-off curation of the quiz dataset (data/quizCapitals.json).

Commands:
    filter  keep only the capitals on a curriculum list (English or Dutch names)
    add     merge extra capital records from another JSON file
    enrich  fill missing area/flag/region from the REST Countries API

Every command rewrites the metadata block so the totals and map bounds match
the capitals that remain.
"""
import argparse
import datetime
import json
import logging
import time
from typing import Dict, Iterable, List, Tuple

import requests

from quiz_config import DATASET_SOURCE, HTTP_TIMEOUT_S, USER_AGENT
from quiz_logging import setup_logging
from quiz_translations import Translator

logger = logging.getLogger(__name__)

RESTCOUNTRIES_URL = "https://restcountries.com/v3.1/alpha"


def load_document(path: str) -> Dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def save_document(path: str, document: Dict) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, ensure_ascii=False, indent=2)


def _on_map(record: Dict) -> bool:
    return bool(record.get("mapPosition")) and not record.get("offMap", False)


def refresh_metadata(document: Dict) -> Dict:
    """Recompute totals and map bounds from the capitals in the document."""
    capitals = document.get("capitals") or []
    positions = [c["mapPosition"] for c in capitals if _on_map(c)]
    meta = dict(document.get("metadata") or {})
    meta["totalCapitals"] = len(capitals)
    meta["calibratedPoints"] = len(positions)
    meta["excludedCapitals"] = len(capitals) - len(positions)
    if positions:
        meta["mapBounds"] = {
            "minX": min(p["x"] for p in positions),
            "maxX": max(p["x"] for p in positions),
            "minY": min(p["y"] for p in positions),
            "maxY": max(p["y"] for p in positions),
        }
    else:
        meta["mapBounds"] = {"minX": 0, "maxX": 0, "minY": 0, "maxY": 0}
    meta["generatedAt"] = datetime.datetime.now(datetime.timezone.utc).isoformat()
    out = dict(document)
    out["metadata"] = meta
    return out


def filter_to_curriculum(
    document: Dict, names: Iterable[str], translator: Translator
) -> Tuple[Dict, List[str]]:
    """Keep only capitals named in names.

    Names may be Dutch ("Parijs") or English ("Paris"). Returns the filtered
    document and the listed names that were not found in the dataset.
    """
    names = [n.strip() for n in names if n and n.strip()]
    wanted = {translator.canonical_capital(n): n for n in names}
    capitals = document.get("capitals") or []
    kept = [c for c in capitals if c.get("capital") in wanted]
    found = {c.get("capital") for c in kept}
    missing = [listed for canonical, listed in wanted.items() if canonical not in found]

    out = dict(document)
    out["capitals"] = kept
    out = refresh_metadata(out)
    out["metadata"]["originalTotal"] = len(capitals)
    out["metadata"]["requiredCities"] = names
    return out, missing


def add_capitals(document: Dict, extra: Iterable[Dict]) -> Dict:
    """Merge extra capital records; a record with an existing id replaces it."""
    capitals = list(document.get("capitals") or [])
    index = {c.get("id"): i for i, c in enumerate(capitals)}
    for record in extra:
        rid = record.get("id")
        if rid in index:
            capitals[index[rid]] = record
        else:
            index[rid] = len(capitals)
            capitals.append(record)
    out = dict(document)
    out["capitals"] = capitals
    return refresh_metadata(out)


def fetch_country_facts(codes: List[str]) -> Dict[str, Dict]:
    """Return {cca2: {"area", "flag", "subregion"}} for ISO alpha-2 codes."""
    if not codes:
        return {}
    facts: Dict[str, Dict] = {}
    # Batch in chunks to keep URLs short
    batch_size = 40
    for i in range(0, len(codes), batch_size):
        batch = codes[i : i + batch_size]
        resp = requests.get(
            RESTCOUNTRIES_URL,
            params={"codes": ",".join(batch), "fields": "cca2,area,flag,subregion"},
            timeout=HTTP_TIMEOUT_S,
            headers={"User-Agent": USER_AGENT},
        )
        resp.raise_for_status()
        for item in resp.json():
            cca2 = (item.get("cca2") or "").strip().upper()
            if cca2:
                facts[cca2] = item
        # Be polite with the endpoint
        time.sleep(0.3)
    return facts


def enrich(document: Dict, facts: Dict[str, Dict]) -> Dict:
    """Fill area, flag and region where a record leaves them empty."""
    capitals = []
    filled = 0
    for record in document.get("capitals") or []:
        record = dict(record)
        item = facts.get((record.get("id") or "").upper())
        if item:
            if not record.get("area") and item.get("area"):
                record["area"] = item["area"]
                filled += 1
            if not record.get("flag") and item.get("flag"):
                record["flag"] = item["flag"]
                filled += 1
            if not record.get("region") and item.get("subregion"):
                record["region"] = item["subregion"]
                filled += 1
        capitals.append(record)
    logger.info("Filled %d missing fields", filled)
    out = dict(document)
    out["capitals"] = capitals
    return refresh_metadata(out)


def main():
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument("--data", default=DATASET_SOURCE, help="dataset JSON to rewrite")
    sub = ap.add_subparsers(dest="command", required=True)
    p_filter = sub.add_parser("filter")
    p_filter.add_argument("names_file", help="text file with one capital name per line")
    p_add = sub.add_parser("add")
    p_add.add_argument("records_file", help="JSON file with a list of capital records")
    sub.add_parser("enrich")
    args = ap.parse_args()

    setup_logging()
    document = load_document(args.data)
    before = len(document.get("capitals") or [])

    if args.command == "filter":
        with open(args.names_file, "r", encoding="utf-8") as f:
            names = f.read().splitlines()
        document, missing = filter_to_curriculum(document, names, Translator())
        for name in missing:
            logger.warning("Not found in dataset: %s (likely outside the map or not a capital)", name)
    elif args.command == "add":
        document = add_capitals(document, load_document(args.records_file))
    else:
        codes = [c.get("id", "") for c in document.get("capitals") or [] if len(c.get("id", "")) == 2]
        document = enrich(document, fetch_country_facts(codes))

    save_document(args.data, document)
    print(f"Capitals: {before} -> {len(document['capitals'])}. File: {args.data}")


if __name__ == "__main__":
    main()
