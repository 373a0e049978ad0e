"""
LeetAid CLI

Terminal front-end for a LeetAid conversation.

Usage:
    leetaid chat                         # Interactive chat, empty line submits
    leetaid chat --end-marker /send      # Submit on a "/send" line instead
    leetaid --version
"""

import asyncio
import logging

import click
from pydantic import ValidationError
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from leetaid import __version__
from leetaid.config import Settings, get_settings
from leetaid.conversations.formatting import code_language, split_content
from leetaid.conversations.models import Message
from leetaid.conversations.store import ConversationStore
from leetaid.endpoint.http import HttpInferenceClient
from leetaid.session.controller import ConversationSession
from leetaid.session.state import ConversationView

console = Console()

EXIT_COMMANDS = {"/exit", "exit", "quit", "/quit"}
CLEAR_COMMAND = "/clear"


def configure_cli_logging(settings: Settings, verbose: bool = False) -> None:
    settings.logging.configure()
    if not verbose:
        logging.getLogger("leetaid").setLevel(logging.WARNING)
    for logger_name in ("httpx", "httpcore", "asyncio"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration:\n{e}") from e


# ============================================================================
# Transcript Rendering
# ============================================================================


def render_content(content: str) -> RenderableType:
    """Render message content, highlighting fenced code regions."""
    parts: list[RenderableType] = []
    for segment in split_content(content):
        if segment.kind == "code":
            language, code = code_language(segment.value)
            parts.append(
                Syntax(
                    code.strip("\n"),
                    language or "text",
                    theme="monokai",
                    word_wrap=True,
                )
            )
        else:
            parts.append(Text(segment.value))
    return Group(*parts)


def render_message(message: Message) -> Panel:
    if message.role == "user":
        return Panel(
            render_content(message.content),
            title="[bold cyan]You[/bold cyan]",
            title_align="right",
            border_style="cyan",
        )
    return Panel(
        render_content(message.content),
        title="[bold green]LeetAid[/bold green]",
        title_align="left",
        border_style="green",
    )


class TranscriptRenderer:
    """
    Session listener that prints the transcript as it grows.

    Only messages not yet printed are written; a shrinking history (after a
    clear) restarts the count. Errors are shown once per failed submission.
    """

    def __init__(self, output: Console):
        self.console = output
        self._rendered = 0
        self._error_visible = False

    def __call__(self, view: ConversationView) -> None:
        if len(view.messages) < self._rendered:
            self._rendered = 0

        for message in view.messages[self._rendered :]:
            self.console.print(render_message(message))
        self._rendered = len(view.messages)

        if view.last_error and not self._error_visible:
            self.console.print(
                Panel(Text(view.last_error), border_style="red", title="[red]Error[/red]")
            )
            self._error_visible = True
        elif not view.last_error:
            self._error_visible = False


# ============================================================================
# Session Wiring
# ============================================================================


def create_session_from_config(
    settings: Settings,
) -> tuple[ConversationSession, HttpInferenceClient]:
    """Create a session and its endpoint client from configuration."""
    if not settings.endpoint.url:
        console.print("[red]No inference endpoint configured.[/red]")
        console.print("[yellow]Hint: Set ENDPOINT_URL in your environment or .env.[/yellow]")
        raise click.ClickException("Missing inference endpoint")

    client = HttpInferenceClient(
        url=settings.endpoint.url,
        timeout=settings.endpoint.timeout,
    )
    store = ConversationStore(settings.storage.path, key=settings.storage.key)
    return ConversationSession(client=client, store=store), client


# ============================================================================
# CLI Commands
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="LeetAid")
@click.option("--verbose", is_flag=True, help="Show application log output.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """LeetAid - small hints for big breakthroughs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@click.option(
    "--end-marker",
    default="",
    help="Line that submits the draft (default: an empty line).",
)
@click.pass_context
def chat(ctx: click.Context, end_marker: str):
    """Interactive chat: paste code, get hints."""
    settings = _load_settings()
    configure_cli_logging(settings, verbose=ctx.obj.get("verbose", False))
    session, client = create_session_from_config(settings)

    submit_hint = "an empty line" if end_marker == "" else f"'{end_marker}'"
    console.print(
        Panel.fit(
            "[bold green]LeetAid[/bold green] - small hints for big breakthroughs\n"
            f"Paste your code, then enter {submit_hint} to send. "
            "Type '/clear' to clear the chat or '/exit' to leave.",
            border_style="green",
        )
    )

    async def run_chat():
        session.subscribe(TranscriptRenderer(console))
        session.initialize()

        draft_lines: list[str] = []
        try:
            while True:
                prompt = "[bold cyan]You:[/bold cyan] " if not draft_lines else "[dim]...[/dim]  "
                try:
                    line = console.input(prompt)
                except EOFError:
                    break
                except KeyboardInterrupt:
                    draft_lines = []
                    session.set_draft("")
                    console.print("\n[yellow]Draft discarded. Type '/exit' to quit.[/yellow]")
                    continue

                command = line.strip().lower()
                if not draft_lines and command in EXIT_COMMANDS:
                    console.print("\n[yellow]Goodbye![/yellow]")
                    break
                if not draft_lines and command == CLEAR_COMMAND:
                    session.clear()
                    console.print("[dim]Conversation cleared.[/dim]")
                    continue

                if line.strip() == end_marker.strip():
                    if not session.view.can_submit:
                        draft_lines = []
                        continue
                    with console.status("[cyan]Processing...[/cyan]", spinner="dots"):
                        await session.submit()
                    draft_lines = []
                    continue

                draft_lines.append(line)
                session.set_draft("\n".join(draft_lines))
        finally:
            await client.aclose()

    asyncio.run(run_chat())


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
