"""Normalize a raw vocabulary export into the dataset the app loads.

Converts numeric declensions (1-5) to ordinal labels, normalizes gender
annotations, capitalizes Spanish translations and assigns stable ids.

Usage:
    python -m scripts.normalize_vocabulary data/raw/vocabulary.json data/vocabulary.json
"""

import argparse
import json
import logging
import re
from pathlib import Path

from backend.vocab.matching import normalize
from backend.vocab.word import normalize_gender

logger = logging.getLogger(__name__)

DECLENSION_MAP = {1: "1st", 2: "2nd", 3: "3rd", 4: "4th", 5: "5th"}


def capitalize_first(text: str) -> str:
    """Uppercase the first letter, leaving the rest (and any accents) untouched."""
    text = (text or "").strip()
    return text[:1].upper() + text[1:]


def make_word_id(nominative: str, index: int) -> str:
    """Build an id from the unaccented nominative and a 1-based index."""
    clean = re.sub(r"[^a-z0-9]", "", normalize(nominative))
    return f"{clean}_{index + 1:04d}"


def normalize_declension(raw: int | str) -> str:
    """Map 1-5 (int or numeric string) to '1st'..'5th'; ordinal labels pass through."""
    if isinstance(raw, str) and raw in DECLENSION_MAP.values():
        return raw
    try:
        return DECLENSION_MAP[int(raw)]
    except (KeyError, TypeError, ValueError):
        raise ValueError(f"Invalid declension: {raw!r}") from None


def normalize_entry(entry: dict, index: int) -> dict:
    """Normalize one raw vocabulary entry."""
    meanings = entry.get("additionalMeanings") or []
    return {
        "id": entry.get("id") or make_word_id(entry["nominative"], index),
        "nominative": entry["nominative"].strip(),
        "genitive": (entry.get("genitive") or "").strip(),
        "declension": normalize_declension(entry["declension"]),
        "gender": normalize_gender(entry.get("gender", "")),
        "spanishTranslation": capitalize_first(entry.get("spanishTranslation", "")),
        "additionalMeanings": [m.strip() for m in meanings if m and m.strip()],
    }


def normalize_vocabulary(raw: list[dict]) -> list[dict]:
    """Normalize every entry, skipping (and logging) entries that can't be fixed."""
    normalized = []
    skipped = 0
    for index, entry in enumerate(raw):
        try:
            normalized.append(normalize_entry(entry, index))
        except (KeyError, ValueError) as e:
            skipped += 1
            logger.warning("Skipping entry %d (%s): %s", index, entry.get("nominative", "?"), e)

    logger.info("Normalized %d entries (%d skipped)", len(normalized), skipped)
    return normalized


def main() -> None:
    parser = argparse.ArgumentParser(description="Normalize a raw vocabulary file")
    parser.add_argument("input", type=Path, help="Raw vocabulary JSON")
    parser.add_argument("output", type=Path, help="Where to write the normalized JSON")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    raw = json.loads(args.input.read_text(encoding="utf-8"))
    normalized = normalize_vocabulary(raw)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(json.dumps(normalized, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    logging.info("Wrote %s", args.output)


if __name__ == "__main__":
    main()
