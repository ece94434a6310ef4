# cli.py
import sys
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from app.config import settings
from sdk.tracker import TrackerClient, TrackerError

console = Console()
c = TrackerClient(base_url=settings.API_URL)

# Global state for status messages and ids seen this session
status_message = "Ready"
known_ids = set()

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def _fmt_ns(value: Optional[int]) -> str:
    if value is None:
        return "-"
    return datetime.fromtimestamp(value / 1e9, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def show_product(p: Dict[str, Any]):
    table = Table(box=box.ROUNDED, show_header=False, show_lines=True)
    table.add_column("Field", style="bold cyan", width=18)
    table.add_column("Value", width=50)

    table.add_row("ID", str(p.get("id")))
    table.add_row("Name", p.get("name", ""))
    table.add_row("Status", f"[green]{p.get('status', '')}[/green]")
    table.add_row("Origin", p.get("origin", ""))
    table.add_row("Location", p.get("current_location", ""))
    table.add_row("Certification", p.get("certification") or "[dim]none[/dim]")
    table.add_row("IoT data", p.get("iot_data") or "[dim]none[/dim]")
    table.add_row("Created", _fmt_ns(p.get("timestamp")))
    table.add_row("Last update", _fmt_ns(p.get("last_update")))

    console.print(Panel(table, title=f"📦 Product {p.get('id')}", border_style="blue"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner and returns its result.
    Server-reported errors (NotFound, InvalidInput) and connection failures
    are shown as a status panel and turned into None.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)
    except TrackerError as e:
        status_message = f"Error: {e.kind}: {e.msg}"
        console.print(show_status(status_message, False))
        return None
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(status_message, False))
        return None

    if success_msg:
        status_message = success_msg
        console.print(show_status(success_msg, True))
    return result


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def get_id_completer():
    return WordCompleter([str(i) for i in sorted(known_ids)])


def ask_product_id() -> Optional[int]:
    raw = prompt_with_autocomplete("Enter product ID", completer=get_id_completer()).strip()
    try:
        return int(raw)
    except ValueError:
        console.print("[red]Product ID must be a whole number.[/red]")
        return None


def ask_optional(message: str, default: Optional[str] = None) -> Optional[str]:
    raw = Prompt.ask(f"{message} [dim](blank for none)[/dim]", default=default or "")
    return raw if raw != "" else None


def ask_product_fields(current: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    current = current or {}
    return {
        "name": prompt_with_autocomplete("Product name", default=current.get("name", "")),
        "origin": prompt_with_autocomplete("Origin", default=current.get("origin", "")),
        "current_location": prompt_with_autocomplete("Current location",
                                                     default=current.get("current_location", "")),
        "status": prompt_with_autocomplete(
            "Status",
            completer=WordCompleter(["Manufactured", "In Transit", "Delivered"], ignore_case=True),
            default=current.get("status", ""),
        ),
        "certification": ask_optional("Certification", current.get("certification")),
        "iot_data": ask_optional("IoT data", current.get("iot_data")),
    }


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🚚 Supply Tracker",
        "[bold blue]Product registry CLI[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message, known_ids

    console.clear()
    console.print(create_header())

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        for row in [
            ("1", "➕ Add product", "4", "🗑️ Delete product"),
            ("2", "ℹ️ Get product by ID", "5", "🔄 Reset registry"),
            ("3", "✏️ Update product", "q", "👋 Quit"),
        ]:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter(["1", "2", "3", "4", "5", "q", "quit", "exit"])
        ).strip()

        if choice == "1":
            fields = ask_product_fields()
            resp = try_api(c.add_product, **fields, success_msg=f"Product '{fields['name']}' added")
            if resp:
                known_ids.add(resp["id"])
                show_product(resp)

        elif choice == "2":
            pid = ask_product_id()
            if pid is not None:
                resp = try_api(c.get_product, pid, success_msg=f"Product {pid} loaded")
                if resp:
                    show_product(resp)

        elif choice == "3":
            pid = ask_product_id()
            if pid is not None:
                current = try_api(c.get_product, pid)
                if current:
                    fields = ask_product_fields(current)
                    resp = try_api(c.update_product, pid, **fields, success_msg=f"Product {pid} updated")
                    if resp:
                        show_product(resp)

        elif choice == "4":
            pid = ask_product_id()
            if pid is not None and Confirm.ask(f"Delete product {pid}?"):
                resp = try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")
                if resp:
                    known_ids.discard(pid)
                    show_product(resp)

        elif choice == "5":
            if Confirm.ask("[red]This will clear all products. Continue?[/red]"):
                if try_api(c.reset, success_msg="Registry reset"):
                    known_ids = set()

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
