"""Loading vocabulary catalogs from JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Union

from src.scheduler.models import VocabularyItem


def _parse_item(entry: Any) -> VocabularyItem:
    if not isinstance(entry, dict):
        raise ValueError(f"Catalog entries must be objects, got {type(entry).__name__}.")

    key = entry.get("text") or entry.get("key")
    if not isinstance(key, str) or not key.strip():
        raise ValueError("Catalog entry is missing a non-empty 'text' field.")

    translations = entry.get("translations") or []
    if isinstance(translations, str):
        translations = [translations]
    if not isinstance(translations, list) or not all(isinstance(value, str) for value in translations):
        raise ValueError(f"Translations for {key!r} must be a list of strings.")

    return VocabularyItem(
        key=key.strip(),
        translations=tuple(value.strip() for value in translations),
        is_new=bool(entry.get("isNew", entry.get("is_new", False))),
        audio_url=entry.get("audioURL") or entry.get("audio_url"),
        phonetic=entry.get("phonetic"),
        example=entry.get("example"),
    )


def parse_catalog(data: Any) -> List[VocabularyItem]:
    """Build catalog items from decoded JSON.

    Accepts either a bare list of entries or an object holding them under
    ``learnedLexemes``. Duplicate keys keep their first occurrence.
    """
    if isinstance(data, dict):
        data = data.get("learnedLexemes")
    if not isinstance(data, list):
        raise ValueError("Catalog must be a list of entries or contain a 'learnedLexemes' list.")

    items: List[VocabularyItem] = []
    seen = set()
    for entry in data:
        item = _parse_item(entry)
        if item.key in seen:
            continue
        seen.add(item.key)
        items.append(item)
    return items


def load_catalog(path: Union[str, Path]) -> List[VocabularyItem]:
    """Read and parse a catalog file."""
    with open(path, encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Catalog file {path} is not valid JSON.") from exc
    return parse_catalog(data)
