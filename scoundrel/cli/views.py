"""Composable view primitives for the Scoundrel CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..cards import Card, CardKind
from ..snapshot import RoomCardView, SessionSnapshot
from ..state import MAX_HEALTH

_KIND_STYLES = {
    CardKind.MONSTER: ("Monster", "red"),
    CardKind.WEAPON: ("Weapon", "magenta"),
    CardKind.POTION: ("Potion", "green"),
}


@dataclass(slots=True)
class SessionSummaryView:
    """Renderable summarising a session snapshot."""

    snapshot: SessionSnapshot
    card_formatter: Callable[[Card], str]

    def _health_markup(self) -> str:
        health = self.snapshot.health
        color = "green" if health > 10 else ("yellow" if health > 5 else "red")
        return f"[{color}]{health}[/{color}]/{MAX_HEALTH}"

    def _card_label(self, view: RoomCardView) -> str:
        return self.card_formatter(Card(suit=view.suit, rank=view.rank))

    def room_table(self) -> Table:
        table = Table(box=box.ROUNDED, expand=True)
        table.add_column("Slot", justify="center", style="bold")
        table.add_column("Card", justify="center")
        table.add_column("Kind", justify="left")
        table.add_column("Note", justify="left")
        if not self.snapshot.room:
            table.add_row("—", "[dim]empty[/dim]", "", "")
        for view in self.snapshot.room:
            kind_label, color = _KIND_STYLES[view.kind]
            note = ""
            if view.pending:
                note = "[reverse] fight? [/reverse]"
            elif view.kind is CardKind.POTION and not self.snapshot.potion_available:
                note = "[dim]would be wasted[/dim]"
            elif view.kind is CardKind.MONSTER and self.snapshot.weapon is not None:
                if view.rank > self.snapshot.weapon_ceiling:
                    note = "[dim]too strong for weapon[/dim]"
            table.add_row(str(view.slot + 1), self._card_label(view), f"[{color}]{kind_label}[/{color}]", note)
        return table

    def player_panel(self) -> Panel:
        snap = self.snapshot
        grid = Table.grid(expand=True)
        grid.add_column(justify="left")
        grid.add_row(f"[cyan]Health[/cyan]: {self._health_markup()}")
        if snap.weapon is not None:
            grid.add_row(f"[cyan]Weapon[/cyan]: {self.card_formatter(snap.weapon)}")
            slain = snap.weapon_last_slain or "—"
            grid.add_row(f"[cyan]Last slain[/cyan]: {slain}")
        else:
            grid.add_row("[cyan]Weapon[/cyan]: —")
        grid.add_row(f"[cyan]Ceiling[/cyan]: {snap.weapon_ceiling}")
        grid.add_row(f"[cyan]Potion[/cyan]: {'ready' if snap.potion_available else 'used'}")
        return Panel(grid, title="Player", box=box.SQUARE, border_style="blue")

    def dungeon_panel(self) -> Panel:
        snap = self.snapshot
        grid = Table.grid(expand=True)
        grid.add_column(justify="left")
        grid.add_row(f"[cyan]Room[/cyan]: {snap.room_number} ({snap.cards_resolved}/3 resolved)")
        grid.add_row(f"[cyan]Dungeon[/cyan]: {snap.dungeon_size} card(s)")
        grid.add_row(f"[cyan]Discard[/cyan]: {snap.discard_size} card(s)")
        grid.add_row(f"[cyan]Avoid[/cyan]: {'available' if snap.avoid_available else 'unavailable'}")
        grid.add_row(f"[cyan]Score[/cyan]: {snap.score}")
        return Panel(grid, title="Dungeon", box=box.SQUARE, border_style="blue")

    def render(self) -> RenderableType:
        components: list[RenderableType] = []
        if self.snapshot.game_over:
            components.append(Text.from_markup("[bold red]Game over[/bold red] • press [bold]R[/bold] to restart"))
        elif self.snapshot.dungeon_cleared:
            components.append(Text.from_markup("[bold green]Dungeon cleared![/bold green]"))
        components.extend([self.room_table(), self.player_panel(), self.dungeon_panel()])
        return Group(*components)
