from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable

import click
from rich.console import Console

from models.token import StoredToken
from services.errors import FemailError
from services.filesystem import GmailFilesystem
from services.gmail_service import GmailClient
from services.token_store import TokenStore
from utils.config import load_config, resolve_config_dir
from utils.logger import configure_logging


LOGGER = logging.getLogger(__name__)
SNIPPET_LIMIT = 50

AUTH_INSTRUCTIONS = """\
To use the Gmail API, you need an access token.

📋 Steps to get your access token:
1. Go to https://developers.google.com/oauthplayground/
2. In the left panel, find 'Gmail API v1'
3. Select 'https://www.googleapis.com/auth/gmail.readonly'
4. Click 'Authorize APIs' and sign in with your Google account
5. Click 'Exchange authorization code for tokens'
6. Copy the 'Access token' value
"""

USAGE = """\
Gmail Filesystem Browser - Real API Integration

Available commands:
  femail auth              - Authenticate with Gmail (run this first)
  femail labels            - List Gmail labels
  femail messages <label>  - List messages in a label
  femail read <label> <id> - Read a specific message

Example usage:
  femail auth
  femail labels
  femail messages INBOX
  femail read INBOX 123abc...
"""


@dataclass(slots=True)
class AppContext:
    console: Console
    token_store: TokenStore
    client_factory: Callable[[], GmailClient]

    def filesystem(self) -> GmailFilesystem:
        return GmailFilesystem(self.client_factory())


def build_context(env_file: str) -> AppContext:
    config = load_config(env_file)
    token_store = TokenStore(config_dir_resolver=partial(resolve_config_dir, config.app_name))
    try:
        log_dir = token_store.config_dir()
    except FemailError:
        log_dir = None
    try:
        configure_logging(log_dir, config.log_level)
    except (ValueError, OSError) as exc:
        configure_logging(None, config.log_level)
        LOGGER.warning("File logging disabled: %s", exc)

    client_factory = partial(
        GmailClient,
        token_store,
        user_id=config.user_id,
        max_results=config.fetch_batch_size,
    )
    return AppContext(
        console=Console(soft_wrap=True),
        token_store=token_store,
        client_factory=client_factory,
    )


def truncate_snippet(snippet: str, limit: int = SNIPPET_LIMIT) -> str:
    if len(snippet) > limit:
        return f"{snippet[:limit]}..."
    return snippet


def _echo(app: AppContext, text: str) -> None:
    """Print provider-supplied text without rich markup, emoji or highlighting."""

    app.console.print(text, markup=False, emoji=False, highlight=False)


@click.group(invoke_without_command=True)
@click.option("--env-file", default=".env", show_default=True, help="Path to the .env file")
@click.pass_context
def cli(ctx: click.Context, env_file: str) -> None:
    """A Gmail filesystem browser: labels are directories, messages are files."""

    if not isinstance(ctx.obj, AppContext):
        try:
            ctx.obj = build_context(env_file)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--env-file") from exc

    app: AppContext = ctx.obj
    app.console.print("[bold]Femail - Gmail Filesystem Browser[/bold]")
    app.console.print("Now with real Gmail API integration!")
    app.console.print()

    if ctx.invoked_subcommand is None:
        app.console.print(USAGE, highlight=False)


@cli.command("auth")
@click.pass_obj
def auth(app: AppContext) -> None:
    """Authenticate with Gmail (run this first)."""

    app.console.print("Setting up Gmail authentication...")
    app.console.print()
    app.console.print(AUTH_INSTRUCTIONS, highlight=False)

    try:
        raw = click.prompt("Enter your access token", default="", show_default=False)
    except click.Abort:
        raw = ""
    access_token = raw.strip()

    if not access_token:
        app.console.print("[red]❌ No token provided.[/red]")
        return

    try:
        if app.token_store.exists():
            LOGGER.info("Replacing existing token at %s", app.token_store.token_path)
        token_path = app.token_store.save(StoredToken(access_token=access_token))
    except FemailError as exc:
        app.console.print("[red]❌ Could not save access token:[/red]", end=" ")
        _echo(app, str(exc))
        return

    LOGGER.info("Saved access token to %s", token_path)
    app.console.print("[green]✅ Access token saved successfully![/green]")
    app.console.print("You can now use other commands like 'femail labels'")
    app.console.print()
    app.console.print("[yellow]Note: This token will expire after 1 hour. You'll need to[/yellow]")
    app.console.print("[yellow]repeat the auth process when it expires.[/yellow]")


@cli.command("labels")
@click.pass_obj
def labels(app: AppContext) -> None:
    """List Gmail labels (directories)."""

    app.console.print("Fetching Gmail labels...")
    try:
        found = app.filesystem().list_labels()
    except FemailError as exc:
        LOGGER.info("Listing labels failed: %s", exc)
        _echo(app, f"❌ Error fetching labels: {exc}")
        app.console.print("Try running 'femail auth' first if you haven't authenticated.")
        return

    app.console.print("Available labels (directories):")
    for label in found:
        _echo(app, f"  📁 {label.name} ({label.id})")


@cli.command("messages")
@click.argument("label")
@click.pass_obj
def messages(app: AppContext, label: str) -> None:
    """List messages in a label."""

    _echo(app, f"Fetching messages from '{label}'...")
    try:
        found = app.filesystem().list_messages(label)
    except FemailError as exc:
        LOGGER.info("Listing messages in %s failed: %s", label, exc)
        _echo(app, f"❌ Error fetching messages: {exc}")
        _echo(app, f"Make sure the label '{label}' exists and you're authenticated.")
        return

    if not found:
        _echo(app, f"No messages found in '{label}'")
        return

    _echo(app, f"Messages in '{label}':")
    for message in found:
        _echo(
            app,
            f"  📧 {message.subject} (from: {message.sender}) - {truncate_snippet(message.snippet)}",
        )


@cli.command("read")
@click.argument("label")
@click.argument("message_id")
@click.pass_obj
def read(app: AppContext, label: str, message_id: str) -> None:
    """Show content of a message."""

    _echo(app, f"Fetching message '{message_id}' from '{label}'...")
    try:
        content = app.filesystem().read_message(message_id)
    except FemailError as exc:
        LOGGER.info("Reading %s from %s failed: %s", message_id, label, exc)
        _echo(app, f"❌ Error reading message '{message_id}' from '{label}': {exc}")
        _echo(app, f"Make sure the message ID '{message_id}' is correct and accessible.")
        return

    click.echo(content)


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
