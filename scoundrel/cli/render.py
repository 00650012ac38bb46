"""Rendering helpers dedicated to the CLI experience."""

from __future__ import annotations

from rich.console import RenderableType
from rich.panel import Panel

from ..cards import Card, Suit
from ..snapshot import SessionSnapshot
from .views import SessionSummaryView

_SUIT_SYMBOLS = {
    Suit.SPADE: ("♠", "cyan"),
    Suit.HEART: ("♥", "red"),
    Suit.DIAMOND: ("♦", "magenta"),
    Suit.CLUB: ("♣", "green"),
}


def format_card(card: Card) -> str:
    """Return a Rich-rendered label for ``card``."""

    symbol, color = _SUIT_SYMBOLS.get(card.suit, (card.suit.value, "white"))
    return f"[{color}]{card.face}{symbol}[/{color}]"


def render_snapshot(snapshot: SessionSnapshot, *, title: str = "Scoundrel") -> RenderableType:
    """Return a Rich panel describing ``snapshot``."""

    view = SessionSummaryView(snapshot=snapshot, card_formatter=format_card)
    return Panel(view.render(), title=title, padding=(0, 1), border_style="cyan")
