# cli.py - interactive admin console for products, categories and orders
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from adminsdk.client import AdminClient
from storeadmin.config import settings
from storeadmin.log import setup_logging
from storeadmin.notifications import NotificationChannel
from storeadmin.presenters import (
    CategoryPresenter, OrderPresenter, PagePresenter, ProductPresenter, UNKNOWN,
)

console = Console()
logger = logging.getLogger(__name__)

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})

SEVERITY_STYLES = {"success": "green", "error": "red", "warning": "yellow", "info": "cyan"}


def money(v: str) -> str:
    return f"{settings.currency_symbol}{v}"


# ---------------------------
# Spinner around remote calls
# ---------------------------
def busy(fn: Callable, *args, **kwargs):
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
        console=console,
    ) as progress:
        progress.add_task(description="Processing...", total=None)
        return fn(*args, **kwargs)


def show_notification(page: PagePresenter):
    note = page.notifications.current
    if not note.open:
        return
    style = SEVERITY_STYLES.get(note.severity, "white")
    console.print(Panel.fit(f"[{style}]{note.message}[/{style}]", title="Status"))
    page.dismiss_notification()


# ---------------------------
# Display helpers
# ---------------------------
def _table(title: str, style: str) -> Table:
    return Table(
        title=title,
        box=box.ROUNDED,
        header_style=f"bold {style}",
        title_style="bold magenta",
        show_lines=True,
    )


def show_categories(page: CategoryPresenter):
    if not page.items:
        console.print("[italic yellow]No categories found[/italic yellow]")
        return
    table = _table("🏷️ Categories", "cyan")
    table.add_column("#", justify="right", width=4)
    table.add_column("Name", style="bold", width=30)
    table.add_column("ID", style="dim", width=34)
    for i, c in enumerate(page.items, 1):
        table.add_row(str(i), c.name, c.id)
    console.print(table)


def show_products(page: ProductPresenter):
    if not page.items:
        console.print("[italic yellow]No products found[/italic yellow]")
        return
    table = _table("📦 Products", "cyan")
    table.add_column("#", justify="right", width=4)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Description", width=30, overflow="ellipsis", no_wrap=True)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Categories", width=24)
    table.add_column("Image", width=12)
    for i, p in enumerate(page.items, 1):
        names = page.category_names(p)
        table.add_row(
            str(i),
            p.name,
            p.description,
            money(p.price),
            ", ".join(f"[red]{n}[/red]" if n == UNKNOWN else n for n in names),
            "yes" if p.image_url else "-",
        )
    console.print(table)


def show_orders(page: OrderPresenter):
    if not page.items:
        console.print("[italic yellow]No orders found[/italic yellow]")
        return
    table = _table("📋 Orders", "yellow")
    table.add_column("#", justify="right", width=4)
    table.add_column("Date", width=12)
    table.add_column("Products", width=40)
    table.add_column("Total", justify="right", width=12)
    for i, o in enumerate(page.items, 1):
        table.add_row(str(i), o.date, ", ".join(page.product_names(o)), money(o.total))
    console.print(table)


def show_errors(page: PagePresenter):
    for field, message in page.errors.items():
        console.print(f"[red]  {field}: {message}[/red]")


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = "") -> str:
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def pick_record(page: PagePresenter):
    if not page.items:
        console.print("[italic yellow]Nothing to pick[/italic yellow]")
        return None
    raw = prompt_with_autocomplete(
        "Row number",
        completer=WordCompleter([str(i) for i in range(1, len(page.items) + 1)]),
    ).strip()
    try:
        idx = int(raw) - 1
    except ValueError:
        console.print("[red]Please enter a row number.[/red]")
        return None
    if not 0 <= idx < len(page.items):
        console.print("[red]No such row.[/red]")
        return None
    return page.items[idx]


def pick_many(message: str, options: List, current: List[str]) -> List[str]:
    """Comma-separated multi-select over records that have `id` and `name`."""
    by_name = {o.name.lower(): o.id for o in options}
    ids = {o.id for o in options}
    names = {o.id: o.name for o in options}
    default = ", ".join(names.get(i, i) for i in current)
    raw = prompt_with_autocomplete(
        f"{message} (comma separated)",
        completer=WordCompleter([o.name for o in options], ignore_case=True),
        default=default,
    )
    picked: List[str] = []
    for token in (t.strip() for t in raw.split(",")):
        if not token:
            continue
        if token in ids:
            picked.append(token)
        elif token.lower() in by_name:
            picked.append(by_name[token.lower()])
        elif token in current:
            picked.append(token)
        else:
            console.print(f"[yellow]Ignoring unknown entry '{token}'[/yellow]")
    return picked


# ---------------------------
# Forms
# ---------------------------
def fill_category_form(page: CategoryPresenter):
    page.set_field("name", prompt_with_autocomplete("Category name", default=page.form["name"]))


def fill_product_form(page: ProductPresenter):
    page.set_field("name", prompt_with_autocomplete("Product name", default=page.form["name"]))
    page.set_field("description", prompt_with_autocomplete("Description", default=page.form["description"]))
    page.set_field("price", prompt_with_autocomplete("💰 Price", default=str(page.form["price"])))
    page.set_field("category_ids", pick_many("🏷️ Categories", page.categories, page.form["category_ids"]))
    image = prompt_with_autocomplete(
        "Image URL or local file (optional)", default=page.form["image_url"]
    ).strip()
    if image and Path(image).is_file():
        busy(page.attach_image, image)
    else:
        page.set_field("image_url", image)


def fill_order_form(page: OrderPresenter):
    page.set_field("date", prompt_with_autocomplete("Date (YYYY-MM-DD)", default=page.form["date"]))
    page.set_field("product_ids", pick_many("📦 Products", page.products, page.form["product_ids"]))
    console.print(f"Total: [bold]{money(page.form['total'])}[/bold]")


def run_dialog(page: PagePresenter, fill: Callable):
    """Loop over the form until it saves or the user gives up."""
    heading = f"Edit {page.singular}" if page.dialog.mode == "edit" else f"Add new {page.singular}"
    console.print(Panel.fit(heading, border_style="blue"))
    while page.dialog.open:
        fill(page)
        if busy(page.submit):
            break
        show_errors(page)
        show_notification(page)
        if not Confirm.ask("Try again?", default=True):
            page.close_dialog()


# ---------------------------
# Pages
# ---------------------------
PAGE_VIEWS = {
    CategoryPresenter: (show_categories, fill_category_form),
    ProductPresenter: (show_products, fill_product_form),
    OrderPresenter: (show_orders, fill_order_form),
}


def page_loop(page: PagePresenter):
    show, fill = PAGE_VIEWS[type(page)]
    busy(page.mount)
    show_notification(page)

    while True:
        console.print()
        console.rule(f"[bold]{page.title}[/bold]", style="dim")
        show(page)

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=24)
        for row in (("a", f"➕ Add {page.singular}"), ("e", "✏️ Edit"), ("d", "🗑️ Delete"),
                    ("r", "🔄 Reload"), ("b", "↩️ Back")):
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title=page.title, border_style="yellow"))

        choice = prompt_with_autocomplete(
            "Choose an option", completer=WordCompleter(["a", "e", "d", "r", "b"])
        ).strip().lower()

        if choice == "a":
            page.add_new()
            run_dialog(page, fill)
        elif choice == "e":
            record = pick_record(page)
            if record is not None:
                page.edit(record)
                run_dialog(page, fill)
        elif choice == "d":
            record = pick_record(page)
            if record is not None:
                page.delete(record.id, lambda q: Confirm.ask(f"[red]{q}[/red]"))
        elif choice == "r":
            busy(page.mount)
        elif choice in ("b", "back", "q"):
            return
        show_notification(page)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Store Admin",
        f"[bold blue]{settings.api_base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def menu(client: Optional[AdminClient] = None):
    client = client or AdminClient(
        base_url=settings.api_base_url,
        api_key=settings.api_key,
        timeout=settings.api_timeout,
        upload_url=settings.upload_url,
    )
    console.clear()
    console.print(create_header())

    pages = {
        "1": lambda: ProductPresenter(client, NotificationChannel()),
        "2": lambda: CategoryPresenter(client, NotificationChannel()),
        "3": lambda: OrderPresenter(client, NotificationChannel()),
    }

    while True:
        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        for row in (("1", "📦 Products"), ("2", "🏷️ Categories"), ("3", "📋 Orders"), ("q", "👋 Quit")):
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose a page",
            completer=WordCompleter(list(pages) + ["q", "quit", "exit"])
        ).strip().lower()

        if choice in pages:
            # a fresh presenter per visit, like remounting the page
            page_loop(pages[choice]())
        elif choice in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                return


def main():
    setup_logging(settings.log_level, rich_console=console)
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        logger.exception("admin console crashed")
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
