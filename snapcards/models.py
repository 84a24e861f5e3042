"""Playing-card data used when dealing a new game."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import List

SUITS = ("♠", "♥", "♦", "♣")
VALUES = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")
RED_SUITS = frozenset({"♥", "♦"})


@dataclass(frozen=True, slots=True)
class CardFace:
    """Suit and value printed on a standard playing card."""

    suit: str
    value: str

    @property
    def label(self) -> str:
        return f"{self.value}{self.suit}"

    @property
    def is_red(self) -> bool:
        return self.suit in RED_SUITS


@dataclass(slots=True)
class Deck:
    """Ordered collection of card faces."""

    faces: List[CardFace] = field(default_factory=list)

    @classmethod
    def standard(cls) -> "Deck":
        """Return the 52 faces of a standard deck, unshuffled."""

        return cls([CardFace(suit, value) for suit in SUITS for value in VALUES])

    def shuffle(self, rng: Random | None = None) -> None:
        """Shuffle the deck in place."""

        (rng or Random()).shuffle(self.faces)
