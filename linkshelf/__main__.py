"""Entry point for the Linkshelf CLI."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .capabilities import resolve_capabilities
from .config import CONFIG_FILENAME, load_config
from .controller import ShelfController
from .errors import ShelfError
from .log import configure_logging, logger
from .models import Item, Mode
from .platform import (
    PLATFORM,
    abbreviate_home,
    clipboard_commands,
    linkshelf_home,
)
from .store import ShelfStore

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------


def _find_mode(modes: Sequence[Mode], ref: str) -> Mode | None:
    """Match a mode by id, then by case-insensitive name."""
    for mode in modes:
        if mode.id == ref:
            return mode
    lowered = ref.strip().lower()
    for mode in modes:
        if mode.name.lower() == lowered:
            return mode
    return None


def _find_item(mode: Mode, ref: str) -> Item | None:
    """Match an item by id, then by case-insensitive label."""
    for item in mode.items:
        if item.id == ref:
            return item
    lowered = ref.strip().lower()
    for item in mode.items:
        if item.label.lower() == lowered:
            return item
    return None


def _find_section_id(mode: Mode, ref: str) -> str | None:
    lowered = ref.strip().lower()
    for section in mode.sections or ():
        if section.id == ref or section.name.lower() == lowered:
            return section.id
    return None


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _render_mode(mode: Mode) -> None:
    sections = {section.id: section for section in mode.sections or ()}
    table = Table(title=escape(mode.name), title_justify="left")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Label", style="bold")
    table.add_column("Value")
    table.add_column("Type", style="dim")
    table.add_column("Section", style="cyan")
    table.add_column("Id", style="dim")
    for item in sorted(mode.items, key=lambda entry: entry.order):
        section = sections.get(item.section_id or "")
        table.add_row(
            str(item.order),
            escape(item.label),
            escape(item.value),
            item.type,
            escape(section.name) if section else "",
            item.id,
        )
    console.print(table)


def _render_modes(controller: ShelfController) -> None:
    current = controller.current_mode
    for mode in controller.modes:
        is_current = current is not None and mode.id == current.id
        marker = "[green]*[/green]" if is_current else " "
        console.print(
            f"{marker} {escape(mode.name)} "
            f"[dim]({mode.id}, {len(mode.items)} items)[/dim]"
        )


def _section_not_found(ref: str) -> int:
    err_console.print(f"[red]Error:[/red] Section not found: {escape(ref)}")
    return 1


def _report(controller: ShelfController) -> int:
    """Print the controller's banner error, if any. Returns the exit code."""
    if controller.error:
        err_console.print(f"[red]Error:[/red] {escape(controller.error)}")
        return 1
    return 0


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _run(args: argparse.Namespace, controller: ShelfController) -> int:
    await controller.load()
    if controller.error or controller.document is None:
        return _report(controller)

    mode = controller.current_mode
    command = args.command or "list"

    if command == "list":
        if mode is not None:
            _render_mode(mode)
        return 0

    if command == "modes":
        _render_modes(controller)
        return 0

    if command == "switch":
        target = _find_mode(controller.modes, args.mode)
        if target is None:
            err_console.print(f"[red]Error:[/red] Mode not found: {escape(args.mode)}")
            return 1
        await controller.switch_mode(target.id)
        return _report(controller)

    if command == "new-mode":
        try:
            await controller.add_mode(args.name)
        except ShelfError as exc:
            err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
            return 1
        console.print(f"Created mode [bold]{escape(args.name.strip())}[/bold]")
        return 0

    if command == "rm-mode":
        target = _find_mode(controller.modes, args.mode)
        try:
            await controller.remove_mode(target.id if target else args.mode)
        except ShelfError as exc:
            err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
            return 1
        return 0

    if mode is None:
        err_console.print("[red]Error:[/red] No current mode")
        return 1

    if command == "add":
        section_id = None
        if args.section:
            section_id = _find_section_id(mode, args.section)
            if section_id is None:
                return _section_not_found(args.section)
        item_type = "text" if args.text else "link"
        await controller.add_item(
            args.label, args.value, type=item_type, section_id=section_id
        )
        return _report(controller)

    if command in ("edit", "rm", "copy"):
        item = _find_item(mode, args.item)
        if item is None:
            err_console.print(f"[red]Error:[/red] Item not found: {escape(args.item)}")
            return 1
        if command == "rm":
            await controller.delete_item(item.id)
        elif command == "copy":
            await controller.copy_to_clipboard(item.value)
            if not controller.error:
                console.print(f"Copied [bold]{escape(item.label)}[/bold]")
        else:
            updates: dict[str, object] = {}
            if args.label is not None:
                updates["label"] = args.label
            if args.value is not None:
                updates["value"] = args.value
            if args.type is not None:
                updates["type"] = args.type
            if args.section:
                section_id = _find_section_id(mode, args.section)
                if section_id is None:
                    return _section_not_found(args.section)
                updates["section_id"] = section_id
            elif args.section is not None:
                updates["section_id"] = None
            await controller.update_item(item.id, **updates)
        return _report(controller)

    if command == "reorder":
        ids = []
        for ref in args.items:
            item = _find_item(mode, ref)
            ids.append(item.id if item else ref)
        await controller.reorder_items(ids)
        return _report(controller)

    if command == "section":
        if args.action == "add":
            await controller.add_section(" ".join(args.args))
        elif args.action in ("rm", "rename"):
            usage = "SECTION" if args.action == "rm" else "SECTION NEW_NAME"
            if len(args.args) < (1 if args.action == "rm" else 2):
                err_console.print(
                    f"[red]Error:[/red] usage: section {args.action} {usage}"
                )
                return 1
            section_id = _find_section_id(mode, args.args[0])
            if section_id is None:
                return _section_not_found(args.args[0])
            if args.action == "rm":
                await controller.delete_section(section_id)
            else:
                await controller.update_section(section_id, " ".join(args.args[1:]))
        else:
            ids = [_find_section_id(mode, ref) or ref for ref in args.args]
            await controller.reorder_sections(ids)
        return _report(controller)

    if command == "prefs":
        changes: dict[str, object] = {}
        if args.theme is not None:
            changes["theme"] = args.theme
        if args.height is not None:
            changes["window_height"] = args.height
        if args.pin is not None:
            changes["always_on_top"] = args.pin
        store = controller.store
        try:
            if changes:
                prefs = await store.update_preferences(**changes)
            else:
                prefs = await store.load_preferences()
        except ShelfError as exc:
            err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
            return 1
        console.print(f"theme:          {prefs.theme}")
        console.print(f"window height:  {prefs.window_height}")
        console.print(f"always on top:  {'yes' if prefs.always_on_top else 'no'}")
        return 0

    if command == "reset":
        if await controller.reset_to_defaults():
            console.print("Shelf reset to defaults")
        return _report(controller)

    err_console.print(f"[red]Error:[/red] unknown command {command}")
    return 2


def _run_doctor(config_path: str) -> int:
    """Print where Linkshelf reads and writes, then exit."""
    config = load_config()
    console.print("Linkshelf -- Environment\n")
    console.print(f"  Version:   {__version__}")
    console.print(f"  Python:    {sys.executable} ({sys.version.split()[0]})")
    console.print(f"  Platform:  {PLATFORM}")
    console.print(f"  Home:      {abbreviate_home(str(linkshelf_home()))}")
    console.print(f"  Config:    {abbreviate_home(config_path)}")
    console.print(f"  Data dir:  {abbreviate_home(str(config.data_dir))}")
    console.print(f"  Backend:   {config.backend}")
    tools = ", ".join(cmd[0] for cmd in clipboard_commands()) or "none (OSC 52 only)"
    console.print(f"  Clipboard: {tools}")
    log_file = abbreviate_home(str(config.log_file))
    console.print(f"  Log file:  {log_file} ({config.log_level})")
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linkshelf", description="Linkshelf")
    parser.add_argument(
        "--version", "-V", action="version", version=f"linkshelf {__version__}"
    )
    parser.add_argument(
        "--doctor", action="store_true", help="Show paths and settings and exit"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log debug output to stderr"
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("list", help="Show items in the current mode")
    sub.add_parser("modes", help="List modes")

    p = sub.add_parser("switch", help="Switch to another mode")
    p.add_argument("mode", help="Mode name or id")

    p = sub.add_parser("new-mode", help="Create a mode and switch to it")
    p.add_argument("name")

    p = sub.add_parser("rm-mode", help="Delete a mode")
    p.add_argument("mode", help="Mode name or id")

    p = sub.add_parser("add", help="Add an item to the current mode")
    p.add_argument("label")
    p.add_argument("value")
    p.add_argument(
        "--text", action="store_true", help="Store as a text snippet, not a link"
    )
    p.add_argument("--section", help="Section name or id")

    p = sub.add_parser("edit", help="Change an item")
    p.add_argument("item", help="Item label or id")
    p.add_argument("--label")
    p.add_argument("--value")
    p.add_argument("--type", choices=["link", "text"])
    p.add_argument("--section", help="Section name or id ('' to unassign)")

    p = sub.add_parser("rm", help="Delete an item")
    p.add_argument("item", help="Item label or id")

    p = sub.add_parser("copy", help="Copy an item's value to the clipboard")
    p.add_argument("item", help="Item label or id")

    p = sub.add_parser("reorder", help="Set item order (unlisted items keep theirs)")
    p.add_argument("items", nargs="+", help="Item labels or ids, in the new order")

    p = sub.add_parser("section", help="Manage sections in the current mode")
    p.add_argument("action", choices=["add", "rm", "rename", "reorder"])
    p.add_argument("args", nargs="*")

    p = sub.add_parser("prefs", help="Show or change preferences")
    p.add_argument("--theme", choices=["light", "dark"])
    p.add_argument("--height", type=float)
    pin = p.add_mutually_exclusive_group()
    pin.add_argument("--pin", dest="pin", action="store_true", default=None)
    pin.add_argument("--no-pin", dest="pin", action="store_false")

    sub.add_parser("reset", help="Restore default modes, items and preferences")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Linkshelf CLI."""
    args = build_parser().parse_args(argv)
    config_path = str(linkshelf_home() / CONFIG_FILENAME)

    if args.doctor:
        return _run_doctor(config_path)

    config = load_config()
    if args.verbose:
        configure_logging("DEBUG")
    else:
        configure_logging(config.log_level, config.log_file)

    controller = ShelfController(ShelfStore(resolve_capabilities(config)))
    try:
        return asyncio.run(_run(args, controller))
    except KeyboardInterrupt:
        return 130
    except Exception:
        logger.debug("Fatal error in linkshelf", exc_info=True)
        raise


if __name__ == "__main__":
    sys.exit(main())
