"""
Healing Locator - CLI Entry Point.

Configuration Priority:
    1. CLI arguments (--visible, --timeout, etc.)
    2. Environment variables (HEALING_LOCATOR__BROWSER__HEADLESS, etc.)
    3. Config file (healing-locator.yaml)

Usage:
    healing-locator stats learning.json
    healing-locator fingerprints learning.json
    healing-locator probe https://portal-uat.ntdp-sa.com/login --identifier LoginButton --role button --text Login
"""

import asyncio
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from healing_locator.config import get_settings
from healing_locator.engine.adaptive import parse_learning_data, read_learning_file
from healing_locator.engine.strategy_tracker import StrategyRecord
from healing_locator.exceptions import HealingLocatorError
from healing_locator.utils.logging import setup_logging, setup_logging_from_settings
from healing_locator.utils.waits import with_timeout

app = typer.Typer(
    name="healing-locator",
    help="Self-healing element resolution for Playwright",
    add_completion=False,
)

console = Console()


def _records_table(title: str, records: List[StrategyRecord]) -> Table:
    table = Table(title=escape(title), show_header=True, header_style="bold cyan")
    table.add_column("Candidate")
    table.add_column("Priority", justify="right")
    table.add_column("Rate", justify="right")
    table.add_column("Attempts", justify="right")
    table.add_column("Successes", justify="right")
    for stats in records:
        table.add_row(
            escape(stats.name),
            str(stats.priority),
            f"{stats.success_rate:.0%}",
            str(stats.attempts),
            str(stats.successes),
        )
    return table


def _matched_record(before: Dict[str, int], records: List[StrategyRecord]) -> Optional[StrategyRecord]:
    """The record whose success count grew since the before snapshot."""
    return next((r for r in records if r.successes > before.get(r.name, 0)), None)


def _load(file_path: str):
    try:
        return parse_learning_data(read_learning_file(file_path))
    except HealingLocatorError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def stats(
    file_path: str = typer.Argument(..., help="Exported learning data (.json)"),
    identifier: Optional[str] = typer.Option(None, "--identifier", "-i", help="Only show this target"),
):
    """
    Show strategy statistics from a learning data file.
    """
    tracker, _ = _load(file_path)

    identifiers = tracker.identifiers
    if identifier:
        if identifier not in identifiers:
            console.print(f"[yellow]⚠ No statistics for {identifier}[/yellow]")
            raise typer.Exit(1)
        identifiers = [identifier]

    if not identifiers:
        console.print("[yellow]⚠ No statistics recorded[/yellow]")
        return

    for name in identifiers:
        console.print(_records_table(name, tracker.records(name)))


@app.command()
def fingerprints(
    file_path: str = typer.Argument(..., help="Exported learning data (.json)"),
):
    """
    Show stored element fingerprints from a learning data file.
    """
    _, stored = _load(file_path)

    if not stored:
        console.print("[yellow]⚠ No fingerprints recorded[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Target")
    table.add_column("Tag")
    table.add_column("Attributes", style="dim")
    table.add_column("Text")
    table.add_column("Position", justify="right")

    for identifier, fp in stored.items():
        attributes = " ".join(f'{k}="{v}"' for k, v in fp.attributes.items())
        position = f"{fp.position[0]:.0f},{fp.position[1]:.0f}" if fp.position else "-"
        table.add_row(escape(identifier), fp.tag, escape(attributes), escape(fp.text or ""), position)

    console.print(table)


@app.command()
def probe(
    url: str = typer.Argument(..., help="Page to open"),
    identifier: str = typer.Option(..., "--identifier", "-i", help="Target identifier"),
    role: Optional[str] = typer.Option(None, "--role", help="ARIA role (used with --name or --text)"),
    name: Optional[str] = typer.Option(None, "--name", help="Accessible name for --role (defaults to --text)"),
    text: Optional[str] = typer.Option(None, "--text", help="Visible text or accessible name"),
    test_id: Optional[str] = typer.Option(None, "--test-id", help="data-testid value"),
    label: Optional[str] = typer.Option(None, "--label", help="Associated label text"),
    placeholder: Optional[str] = typer.Option(None, "--placeholder", help="Placeholder text"),
    css: Optional[str] = typer.Option(None, "--css", help="CSS selector"),
    xpath: Optional[str] = typer.Option(None, "--xpath", help="XPath selector"),
    learning_file: Optional[str] = typer.Option(None, "--learning-file", "-l", help="Load and save learning data here"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    timeout: int = typer.Option(60, "--timeout", "-t", help="Max execution time in seconds"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose output"),
):
    """
    Open a page and locate one element with the self-healing finders.

    Examples:
        healing-locator probe https://example.com --identifier Heading --role heading --text Example
        healing-locator probe https://example.com -i Submit --role button --name "Sign in" --css "form button"
        healing-locator probe https://example.com -i Link --css "a.more" --text "More" --visible
    """
    if verbose:
        setup_logging(level="DEBUG")
    else:
        setup_logging_from_settings(get_settings().logging)

    options = {
        "role": role,
        "name": name,
        "text": text,
        "test_id": test_id,
        "label": label,
        "placeholder": placeholder,
        "css": css,
        "xpath": xpath,
    }

    console.print(Panel.fit(
        f"[bold blue]🩹 Healing Locator[/bold blue]\n"
        f"[dim]URL:[/dim] {url}\n"
        f"[dim]Target:[/dim] {identifier}",
        border_style="blue",
    ))

    try:
        asyncio.run(with_timeout(
            _probe_async(url, identifier, options, headless=not visible, learning_file=learning_file),
            timeout,
            f"Probe did not finish within {timeout}s",
        ))
    except asyncio.TimeoutError as e:
        console.print(f"\n[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except HealingLocatorError as e:
        console.print(f"\n[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)


async def _probe_async(
    url: str,
    identifier: str,
    options: Dict[str, Any],
    headless: bool,
    learning_file: Optional[str] = None,
) -> None:
    """Launch a browser, resolve the target and print what matched."""
    from healing_locator.browsers.playwright_page import launch_page
    from healing_locator.locator import SelfHealingLocator

    settings = get_settings()
    locator_settings = settings.locator
    if learning_file:
        locator_settings = locator_settings.model_copy(update={"learning_file": learning_file})

    async with launch_page(
        headless=headless,
        browser_type=settings.browser.browser_type,
        viewport={
            "width": settings.browser.viewport_width,
            "height": settings.browser.viewport_height,
        },
        timeout_ms=settings.browser.timeout_ms,
        navigation_timeout_ms=settings.browser.navigation_timeout_ms,
        slow_mo=settings.browser.slow_mo,
    ) as page:
        console.print(f"[dim]🌐 Navigating to {url}...[/dim]")
        await page.goto(url, wait_until="domcontentloaded")

        locator = SelfHealingLocator.for_playwright(page, locator_settings)
        before = {r.name: r.successes for r in locator.get_strategy_records(identifier)}
        await locator.smart_locate(identifier, **options)

        matched = _matched_record(before, locator.get_strategy_records(identifier))
        console.print(f"\n[green]✓ Located {identifier}[/green]")
        if matched:
            console.print(f"  Matched: {escape(matched.name)}")
        else:
            console.print("  Matched: similarity recovery")
        console.print(_records_table(identifier, locator.get_strategy_records(identifier)))

        fp = locator.get_fingerprint(identifier)
        if fp:
            console.print(f"  Fingerprint: <{fp.tag}> {escape(fp.text or '')}")

        locator.persist()


if __name__ == "__main__":
    app()
