"""
YAML deck files for the CLI.

A deck file is a mapping with a `cards` list:

    title: Biology
    cards:
      - id: bio_001
        front: Powerhouse of the cell
        back: Mitochondria
"""

import logging
from pathlib import Path

import yaml  # type: ignore

from cardquest.domain.errors import DeckFileError
from cardquest.domain.models import Card

logger = logging.getLogger(__name__)


def parse_deck(text: str, source: str = "<string>") -> list[Card]:
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise DeckFileError(f"{source}: invalid YAML: {e}") from e

    if isinstance(data, list):
        raw_cards = data
    elif isinstance(data, dict):
        raw_cards = data.get("cards", [])
    else:
        raise DeckFileError(f"{source}: expected a mapping or a list of cards")

    if not isinstance(raw_cards, list):
        raise DeckFileError(f"{source}: 'cards' must be a list")

    cards: list[Card] = []
    seen: set[str] = set()
    for i, raw in enumerate(raw_cards, start=1):
        if not isinstance(raw, dict):
            raise DeckFileError(f"{source}: card #{i} is not a mapping")

        front = raw.get("front")
        back = raw.get("back")
        if front is None or back is None:
            raise DeckFileError(f"{source}: card #{i} needs both 'front' and 'back'")

        card_id = str(raw.get("id") or f"card_{i}")
        if card_id in seen:
            raise DeckFileError(f"{source}: duplicate card id '{card_id}'")
        seen.add(card_id)

        cards.append(
            Card(
                id=card_id,
                front=str(front),
                back=str(back),
                front_image_url=raw.get("front_image_url"),
                back_image_url=raw.get("back_image_url"),
            )
        )

    logger.debug(f"Loaded {len(cards)} cards from {source}")
    return cards


def load_deck(path: Path) -> list[Card]:
    """Read a deck file from disk."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DeckFileError(f"Cannot read deck file {path}: {e}") from e
    return parse_deck(text, source=str(path))
