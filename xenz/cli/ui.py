import os

import inquirer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from xenz import __version__

console = Console()

# status -> (icon, style)
STEP_MARKS = {
    "done": ("✅", "bold green"),
    "active": ("⏳", "bold cyan"),
    "error": ("❌", "bold red"),
}
RAIL = "  │"


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def _say(icon, message, style):
    console.print(f"  {icon} {message}", style=style)


def show_success(message):
    _say("✅", message, "bold green")


def show_error(message):
    _say("❌", message, "bold red")


def show_warning(message):
    _say("⚠️ ", message, "yellow")


def show_info(message):
    _say("ℹ️ ", message, "bold blue")


def print_header():
    '''XENZ logo with version'''
    logo = Text()
    for line, style in (
        (" __  _____ _  _ ____\n", "bold cyan"),
        (" \\ \\/ / __| \\| |_  /\n", "bold cyan"),
        ("  >  <| _|| .` |/ / \n", "cyan"),
        (" /_/\\_\\___|_|\\_/___|\n\n", "dim cyan"),
    ):
        logo.append(line, style=style)
    logo.append(f"  v{__version__}", style="bold white")
    logo.append("  |  Server Tool Menu", style="dim")
    console.print(Panel(logo, border_style="cyan", padding=(1, 2)))


def show_panel(title, content, style="cyan"):
    '''Fresh screen: header, then ``content`` framed under ``title``'''
    clear_screen()
    print_header()
    console.print(Panel(content, title=title, border_style=style))


def _rail(end=None):
    if end is None:
        console.print(RAIL, style="dim cyan")
    else:
        console.print(RAIL, style="dim cyan", end=end)


def show_step(message, status="done"):
    '''One step of a flow, hung off the vertical rail.
    status is one of STEP_MARKS; anything else prints a bullet.
    '''
    icon, style = STEP_MARKS.get(status, ("•", "white"))
    _rail()
    console.print(f"  ├── {icon} {message}", style=style)


def show_step_final(message, success=True):
    icon, style = STEP_MARKS["done" if success else "error"]
    _rail()
    console.print(f"  └── {icon} {message}", style=style)


def step_input(prompt):
    _rail(end="")
    return input(f"     {prompt}")


def show_result_panel(content, title="Success"):
    console.print()
    console.print(Panel(
        content,
        title=f"[bold green]{title}[/bold green]",
        border_style="green",
        padding=(1, 2),
    ))


def show_tool_output(output, limit=1500):
    '''Print the tail of an external tool's output'''
    if output and output.strip():
        console.print(output.strip()[-limit:], style="dim red", markup=False, highlight=False)


def select_from_list(message, choices):
    '''Arrow-key selection. Ctrl+C answers with the last choice (Back/Exit).'''
    answer = inquirer.prompt([inquirer.List('selection', message=message, choices=choices)])
    return answer['selection'] if answer else choices[-1]


def step_select(message, choices, cancel_label="Cancel"):
    '''Numbered selection on the rail.
    Lists ``choices`` 1..n and ``cancel_label`` as n+1; returns the raw answer.
    '''
    last = len(choices) + 1
    _rail()
    console.print(f"{RAIL}     [bold cyan]{message}:[/bold cyan]")
    for number, choice in enumerate(choices, 1):
        console.print(f"{RAIL}       {number}) {choice}", style="dim green")
    console.print(f"{RAIL}       {last}) {cancel_label}", style="dim")

    _rail(end="")
    return input(f"     Select [1-{last}]: ").strip()


def show_failure(error):
    '''Show a failed operation and, for external tools, what they printed'''
    show_error(str(error))
    show_tool_output(getattr(error, 'output', ''))
