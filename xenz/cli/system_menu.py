from rich.table import Table

from xenz.cli.ui import console, show_info, show_panel, show_warning
from xenz.utils.system import format_uptime, get_system_stats


def show_system_stats():
    show_panel("System Stats", "Host resources")

    stats = get_system_stats()

    table = Table(title="💻 System", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="cyan", width=16)
    table.add_column("Value", style="white", width=40)

    table.add_row("Hostname", stats['hostname'])
    table.add_row("Uptime", format_uptime(stats['uptime_seconds']))
    table.add_row("CPU", f"{stats['cpu_percent']:.0f}% of {stats['cpu_count']} cores")
    table.add_row("Load", " ".join(f"{x:.2f}" for x in stats['load']))
    table.add_row("Memory", f"{stats['ram_used']:.1f}/{stats['ram_total']:.1f} GB ({stats['ram_percent']:.0f}%)")
    table.add_row("Disk /", f"{stats['disk_used']:.1f}/{stats['disk_total']:.1f} GB ({stats['disk_percent']:.0f}%)")

    console.print()
    console.print(table)
    input("\nPress Enter...")


def show_event_log(manager, limit=50):
    show_panel("Event Log", str(manager.events.log_file))

    lines = manager.events.get_recent_lines(limit)
    if not lines:
        show_warning("No events logged yet")
    else:
        for line in lines:
            style = "red" if "status=failed" in line else "white"
            console.print(f"  {line}", style=style, markup=False, highlight=False)
        print()
        show_info(f"Showing last {len(lines)} events")

    input("\nPress Enter...")
