from rich.table import Table

from xenz.cli.ui import (
    console, select_from_list, show_failure, show_info, show_panel, show_step,
    show_step_final, show_success, show_warning, step_input, step_select,
)
from xenz.core.catalog import format_total
from xenz.core.errors import NoBackupsError, UserCancelled, XenzError
from xenz.core.lifecycle import DELETE_CONFIRMATION


def show_backup_menu(manager):
    while True:
        show_panel("Backup & Restore", f"Archives in {manager.paths.backup_dir}")

        choices = [
            "💾 Create Backup",
            "♻️  Restore from Backup",
            "📋 List Backups",
            "🗑️  Delete All Backups",
            "⬅️  Back to Main Menu"
        ]

        choice = select_from_list("Select action", choices)

        if "Back to Main Menu" in choice:
            break

        if "Create" in choice:
            create_backup_menu(manager)
        elif "Restore" in choice:
            restore_backup_menu(manager)
        elif "List" in choice:
            list_backups(manager)
        elif "Delete" in choice:
            delete_all_backups_menu(manager)


def create_backup_menu(manager):
    show_panel("Create Backup", "Archive the project directory")

    try:
        with console.status("  Creating backup..."):
            backup = manager.backup()
    except XenzError as e:
        show_step_final("Backup failed", False)
        show_failure(e)
    else:
        show_step(f"{backup.name} ({backup.size_display})")
        show_step_final("Backup complete!", True)

    input("\nPress Enter...")


def _backups_table(backups):
    table = Table(title="📋 Available Backups", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("File", style="cyan", width=32)
    table.add_column("Size", style="white", width=10)
    table.add_column("Date", style="white", width=20)

    for i, backup in enumerate(backups, 1):
        table.add_row(str(i), backup.name, backup.size_display, backup.date_display)
    return table


def list_backups(manager):
    show_info("Loading backups...")
    print()

    backups = manager.list_backups()
    if not backups:
        show_warning("No backups found!")
    else:
        console.print()
        console.print(_backups_table(backups))
        console.print()
        show_info(f"{len(backups)} backups, total {format_total(manager.catalog.total_size(backups))}")

    input("\nPress Enter...")


def restore_backup_menu(manager):
    show_panel("Restore from Backup", "Select a backup to restore")

    def choose(backups):
        return step_select(
            "Available backups",
            [f"{b.name}  {b.size_display}  {b.date_display}" for b in backups]
        )

    def confirm(backup):
        show_warning(f"This will OVERWRITE files under {manager.paths.root} with {backup.name}!")
        return step_input("Continue? [y/N]: ")

    try:
        backup = manager.restore(choose, confirm)
    except NoBackupsError:
        show_warning("No backups found!")
    except UserCancelled:
        show_info("Restore cancelled")
    except XenzError as e:
        show_step_final("Restore failed", False)
        show_failure(e)
    else:
        show_step_final(f"Restored {backup.name}", True)
        show_info("Run Update Project to rebuild the containers if needed.")

    input("\nPress Enter...")


def delete_all_backups_menu(manager):
    show_panel("Delete All Backups", "This cannot be undone")

    def confirm(count, total):
        show_warning(f"This will permanently delete {count} backups ({format_total(total)})")
        return step_input(f"Type {DELETE_CONFIRMATION} to confirm: ").strip()

    try:
        result = manager.delete_all(confirm)
    except NoBackupsError:
        show_warning("No backups found!")
    except UserCancelled:
        show_info("Deletion cancelled")
    else:
        show_success(f"Deleted {result.deleted} backups, freed {format_total(result.total_size)}")
        if result.failed:
            show_warning(f"{result.failed} backups could not be deleted")

    input("\nPress Enter...")
