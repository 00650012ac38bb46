"""Textual-powered interactive Scoundrel interface."""

from __future__ import annotations

import random
from typing import Sequence

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static

from ... import actions, scoreboard, state
from ...snapshot import SessionSnapshot, take_snapshot
from ..render import format_card
from ..views import SessionSummaryView

MAX_EVENT_LINES = 18


class EventLog(Static):
    """Simple rolling log rendered inside a panel."""

    lines: reactive[tuple[str, ...]] = reactive((), init=False)

    def on_mount(self) -> None:  # pragma: no cover - widget lifecycle glue
        self._refresh()

    def add(self, message: str) -> None:
        log = list(self.lines)
        log.append(message)
        self.lines = tuple(log[-MAX_EVENT_LINES:])

    def clear(self) -> None:
        self.lines = ()

    def watch_lines(self, value: tuple[str, ...]) -> None:
        self._refresh(value)

    def _refresh(self, lines: tuple[str, ...] | None = None) -> None:
        content = Table.grid(padding=(0, 1))
        content.expand = True
        content.add_column(justify="left")
        rows = lines if lines is not None else self.lines
        if rows:
            for line in rows:
                content.add_row(Text.from_markup(line))
        else:
            content.add_row(Text.from_markup("[dim]Event log will appear here[/dim]"))
        self.update(Panel(content, title="Events", border_style="magenta"))


class InfoPanel(Static):
    """Reusable wrapper that expects ``update_panel`` calls with Rich renderables."""

    def update_panel(self, title: str, body) -> None:
        self.update(Panel(body, title=title, border_style="cyan"))


class ScorePanel(Static):
    """Displays totals across the runs played in this process."""

    def update_scores(self, history: scoreboard.RunHistory) -> None:
        totals = history.totals()
        table = Table(box=box.SIMPLE_HEAVY, expand=True)
        table.add_column("Run", justify="left")
        table.add_column("Score", justify="right")
        table.add_column("Health", justify="right")
        table.add_column("Result", justify="left")
        for run in history.runs[-5:]:
            label = f"#{run.run_number}"
            if run.score == totals.best_score:
                label = f"[bold blue]{label}[/bold blue]"
            result = "[green]Cleared[/green]" if run.cleared else ("Died" if run.health <= 0 else "Abandoned")
            table.add_row(label, str(run.score), str(run.health), result)
        if not history.runs:
            table.add_row(Text.from_markup("[dim]No results yet[/dim]"), "-", "-", "-")
        footer = "[dim]No finished runs[/dim]"
        if totals.runs:
            footer = (
                f"Runs {totals.runs} • Clears {totals.clears} • "
                f"Best {totals.best_score} • Mean {totals.mean_score:.1f}"
            )
        self.update(Panel(Group(table, Text.from_markup(footer)), title="Run Totals", border_style="bright_blue"))


class DebugPanel(Static):
    """Shows the dungeon order when debug mode is on."""

    def update_debug(self, lines: Sequence[str]) -> None:
        grid = Table.grid(padding=(0, 1))
        grid.add_column(justify="left")
        if lines:
            for line in lines:
                grid.add_row(Text.from_markup(line))
        else:
            grid.add_row(Text.from_markup("[dim]Debug data hidden (press T)[/dim]"))
        self.update(Panel(grid, title="Debug", border_style="yellow"))


class StatusStrip(Static):
    """Single line status helper."""

    message: reactive[str] = reactive("", init=False)

    def watch_message(self, value: str) -> None:
        self.update(Panel(Text.from_markup(value or "[dim]Ready[/dim]"), border_style="green"))


class ScoundrelTextualApp(App):
    """Textual Scoundrel game UI."""

    CSS = """
    Screen {
        layout: vertical;
        height: 100%;
    }

    #main {
        layout: horizontal;
        height: 1fr;
        width: 1fr;
    }

    #left, #right {
        layout: vertical;
        width: 1fr;
        height: 1fr;
        padding: 0 1;
        overflow-y: auto;
    }

    StatusStrip {
        width: 100%;
    }

    DebugPanel {
        min-height: 6;
    }

    InfoPanel, EventLog, ScorePanel {
        width: 100%;
        min-height: 6;
    }
    """

    BINDINGS = [
        Binding("1", "select(0)", "Slot 1"),
        Binding("2", "select(1)", "Slot 2"),
        Binding("3", "select(2)", "Slot 3"),
        Binding("4", "select(3)", "Slot 4"),
        Binding("w", "fight(False)", "Weapon"),
        Binding("b", "fight(True)", "Barehanded"),
        Binding("a", "avoid", "Avoid room"),
        Binding("d", "redeal", "Redeal", show=False),
        Binding("r", "restart", "Restart"),
        Binding("t", "toggle_debug", "Debug"),
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False),
    ]

    def __init__(self, *, seed: int | None, debug: bool) -> None:
        super().__init__()
        if seed is None:
            seed = random.SystemRandom().randrange(0, 2**63)
        self.seed = seed
        self.rng = random.Random(seed)
        self.debug_enabled = debug
        self.history = scoreboard.RunHistory()
        self.session = state.new_session(state.SessionConfig(debug=debug), rng=self.rng)
        self._recorded = False

        # Widgets initialised in compose
        self.status_strip: StatusStrip | None = None
        self.room_panel: InfoPanel | None = None
        self.player_panel: InfoPanel | None = None
        self.event_log: EventLog | None = None
        self.score_panel: ScorePanel | None = None
        self.debug_panel: DebugPanel | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        self.status_strip = StatusStrip(id="status")
        yield self.status_strip

        self.room_panel = InfoPanel(id="room")
        self.player_panel = InfoPanel(id="player")
        self.room_panel.update_panel("Room", Text.from_markup("[dim]Shuffling…[/dim]"))
        self.player_panel.update_panel("Adventurer", Text.from_markup("[dim]Waiting…[/dim]"))
        left = Vertical(self.room_panel, self.player_panel, id="left")

        self.event_log = EventLog(id="events")
        self.score_panel = ScorePanel(id="scores")
        self.debug_panel = DebugPanel(id="debug")
        self.score_panel.update_scores(self.history)
        right = Vertical(self.event_log, self.score_panel, self.debug_panel, id="right")

        yield Horizontal(left, right, id="main")
        yield Footer()

    async def on_mount(self) -> None:
        self._log(f"[bold cyan]Run {self.history.next_run_number()}[/bold cyan] seed {self.seed}")
        await self._refresh_ui()

    async def action_select(self, index: int) -> None:
        await self._play(actions.SelectCard(index))

    async def action_fight(self, barehanded: bool) -> None:
        await self._play(actions.ChooseFightStyle(barehanded=barehanded))

    async def action_avoid(self) -> None:
        await self._play(actions.AvoidRoom())

    async def action_redeal(self) -> None:
        await self._play(actions.RedealRoom())

    async def action_restart(self) -> None:
        self._record_run()
        outcome = actions.dispatch(self.session, actions.Restart(), rng=self.rng)
        self.session = outcome.session
        self._recorded = False
        if self.event_log:
            self.event_log.clear()
        self._log(f"[bold cyan]Run {self.history.next_run_number()}[/bold cyan] {outcome.message}")
        await self._refresh_ui()

    async def action_toggle_debug(self) -> None:
        self.debug_enabled = not self.debug_enabled
        self.session.config.debug = self.debug_enabled
        await self._refresh_ui()

    async def _play(self, action: actions.Action) -> None:
        outcome = actions.dispatch(self.session, action, rng=self.rng)
        if not outcome.accepted:
            self._set_status(f"[red]{outcome.message}[/red]")
            return
        self.session = outcome.session
        self._log(_highlight_cards(outcome.message, outcome.result))
        snap = take_snapshot(self.session)
        if snap.game_over or snap.dungeon_cleared:
            self._record_run()
        await self._refresh_ui()

    def _record_run(self) -> None:
        if self._recorded:
            return
        summary = scoreboard.summarise(self.session, self.history.next_run_number())
        self.history.record(summary)
        self._recorded = True
        if summary.cleared:
            self._log(f"[bold green]Dungeon cleared with score {summary.score}![/bold green]")
        elif summary.health <= 0:
            self._log(f"[bold red]Slain. Final score {summary.score}[/bold red]")
        if self.score_panel:
            self.score_panel.update_scores(self.history)

    async def _refresh_ui(self) -> None:
        snap = take_snapshot(self.session)
        view = SessionSummaryView(snapshot=snap, card_formatter=format_card)

        if self.room_panel:
            self.room_panel.update_panel("Room", view.room_table())
        if self.player_panel:
            self.player_panel.update_panel("Adventurer", Group(view.player_panel(), view.dungeon_panel()))
        if self.debug_panel:
            self.debug_panel.update_debug(_debug_lines(snap) if self.debug_enabled else [])
        if self.score_panel:
            self.score_panel.update_scores(self.history)

        self._set_status(_status_line(snap))
        self.title = f"Scoundrel • Room {snap.room_number} • Health {snap.health} • Score {snap.score}"

    def _log(self, message: str) -> None:
        if self.event_log:
            self.event_log.add(message)

    def _set_status(self, message: str) -> None:
        if self.status_strip:
            self.status_strip.message = message


def _highlight_cards(message: str, result: object) -> str:
    card = getattr(result, "card", None) or getattr(result, "monster", None)
    if card is None:
        return message
    return message.replace(card.code, format_card(card), 1)


def _status_line(snap: SessionSnapshot) -> str:
    if snap.game_over:
        return f"[red]You died.[/red] Score {snap.score}. Press [bold]R[/bold] to restart."
    if snap.dungeon_cleared:
        return f"[green]Dungeon cleared![/green] Score {snap.score}. Press [bold]R[/bold] for a new run."
    if snap.fight_pending:
        return "Fight with [bold]W[/bold]eapon or [bold]B[/bold]arehanded?"
    return "Pick a card with [bold]1[/bold]-[bold]4[/bold], [bold]A[/bold] to avoid the room"


def _debug_lines(snap: SessionSnapshot) -> list[str]:
    lines = [
        f"Room number: {snap.room_number}",
        f"Resolved this room: {snap.cards_resolved}",
        f"Rooms avoided: {snap.rooms_avoided}",
        f"Dungeon size: {snap.dungeon_size}",
    ]
    if snap.dungeon_preview:
        lines.append("[bold]Next cards[/bold]:")
        lines.append(" ".join(format_card(card) for card in snap.dungeon_preview[:12]))
    return lines


def run_textual_app(*, seed: int | None, debug: bool) -> None:
    """Launch the Textual UI."""

    app = ScoundrelTextualApp(seed=seed, debug=debug)
    app.run()
