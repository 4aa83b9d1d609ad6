from xenz.cli.ui import (
    select_from_list, show_error, show_panel, show_step, show_step_final, show_warning,
)
from xenz.utils.docker_utils import PRUNE_TARGETS, check_docker_status, cleanup
from xenz.utils.event_log import EventType
from xenz.utils.progress import run_interactive


def show_docker_menu(manager):
    while True:
        show_panel("Docker", "Inspect and clean up Docker")

        choices = [
            "ℹ️  Docker Info",
            "📦 Containers",
            "💽 Disk Usage",
            "🧹 Cleanup (prune images, volumes, networks, build cache)",
            "⬅️  Back to Main Menu"
        ]

        choice = select_from_list("Select action", choices)

        if "Back" in choice:
            break

        status = check_docker_status()
        if not status['installed']:
            show_error(status['message'])
            input("\nPress Enter...")
            continue

        if "Info" in choice:
            run_interactive(['docker', 'info'])
        elif "Containers" in choice:
            run_interactive(['docker', 'ps', '-a'])
        elif "Disk Usage" in choice:
            run_interactive(['docker', 'system', 'df'])
        elif "Cleanup" in choice:
            cleanup_menu(manager)
            continue

        input("\nPress Enter...")


def cleanup_menu(manager):
    show_warning("Unused images, volumes, networks and build cache will be removed!")
    confirm = select_from_list("Are you sure?", ["✅ Yes, clean up", "⬅️  Cancel"])
    if "Cancel" in confirm:
        return

    results = cleanup(PRUNE_TARGETS, manager.run)
    failed = [target for target, result in results.items() if result.returncode != 0]

    for target, result in results.items():
        show_step(f"{target} prune", "done" if result.returncode == 0 else "error")

    manager.events.log_result(
        EventType.DOCKER_CLEANUP, ','.join(PRUNE_TARGETS), not failed,
        failed=','.join(failed) or None
    )
    show_step_final("Cleanup complete" if not failed else f"Cleanup failed for: {', '.join(failed)}", not failed)
    input("\nPress Enter...")
