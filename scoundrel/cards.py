"""Card abstractions, deck assembly and shuffling for Scoundrel."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Iterable, Iterator, Sequence

MIN_RANK: Final[int] = 2
MAX_MONSTER_RANK: Final[int] = 14
MAX_ITEM_RANK: Final[int] = 10
DECK_CARD_COUNT: Final[int] = 44

_FACE_LABELS: Final[dict[int, str]] = {11: "J", 12: "Q", 13: "K", 14: "A"}


class Suit(str, Enum):
    """Enumeration of the four suits in a Scoundrel deck."""

    CLUB = "C"
    SPADE = "S"
    DIAMOND = "D"
    HEART = "H"


class CardKind(str, Enum):
    """Role a card plays in the dungeon, derived from its suit."""

    MONSTER = "monster"
    WEAPON = "weapon"
    POTION = "potion"


_KIND_BY_SUIT: Final[dict[Suit, CardKind]] = {
    Suit.CLUB: CardKind.MONSTER,
    Suit.SPADE: CardKind.MONSTER,
    Suit.DIAMOND: CardKind.WEAPON,
    Suit.HEART: CardKind.POTION,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Value object describing a physical Scoundrel card."""

    suit: Suit
    rank: int

    def __post_init__(self) -> None:
        if not MIN_RANK <= self.rank <= MAX_MONSTER_RANK:
            raise ValueError(f"rank {self.rank} outside {MIN_RANK}..{MAX_MONSTER_RANK}")

    @property
    def kind(self) -> CardKind:
        return _KIND_BY_SUIT[self.suit]

    @property
    def is_monster(self) -> bool:
        return self.kind is CardKind.MONSTER

    @property
    def is_weapon(self) -> bool:
        return self.kind is CardKind.WEAPON

    @property
    def is_potion(self) -> bool:
        return self.kind is CardKind.POTION

    @property
    def face(self) -> str:
        """Return the printed face value (``2``..``10``, ``J``, ``Q``, ``K``, ``A``)."""

        return _FACE_LABELS.get(self.rank, str(self.rank))

    @property
    def code(self) -> str:
        return f"{self.face}{self.suit.value}"

    @classmethod
    def from_code(cls, code: str) -> "Card":
        """Parse a compact code such as ``"10S"`` or ``"AC"``."""

        if len(code) < 2:
            raise ValueError(f"invalid card code '{code}'")
        face, suit_symbol = code[:-1], code[-1]
        suit = Suit(suit_symbol)
        faces = {label: rank for rank, label in _FACE_LABELS.items()}
        rank = faces[face] if face in faces else int(face)
        return cls(suit=suit, rank=rank)


def iter_full_deck() -> Iterator[Card]:
    """Yield all cards of a fresh deck in canonical order."""

    for suit in (Suit.CLUB, Suit.SPADE):
        for rank in range(MIN_RANK, MAX_MONSTER_RANK + 1):
            yield Card(suit=suit, rank=rank)
    for suit in (Suit.DIAMOND, Suit.HEART):
        for rank in range(MIN_RANK, MAX_ITEM_RANK + 1):
            yield Card(suit=suit, rank=rank)


def build_deck() -> list[Card]:
    """Return a deterministic, unshuffled ordering of all 44 cards."""

    return list(iter_full_deck())


def shuffle_deck(cards: Sequence[Card], rng: Any) -> list[Card]:
    """Return a uniformly shuffled copy of ``cards`` using ``rng.shuffle``."""

    deck = list(cards)
    rng.shuffle(deck)
    return deck


def monster_total(cards: Iterable[Card]) -> int:
    """Sum the ranks of every monster in ``cards``."""

    return sum(card.rank for card in cards if card.is_monster)


def format_cards(cards: Sequence[Card]) -> str:
    return " ".join(card.code for card in cards)
