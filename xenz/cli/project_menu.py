# XENZ v1.0
from xenz.cli.ui import (
    select_from_list, show_failure, show_info, show_panel, show_step,
    show_step_final, show_success, show_warning, step_input,
)
from xenz.core.errors import BuildFailedError, StateError, XenzError
from xenz.utils.event_log import EventType
from xenz.utils.progress import run_interactive


def show_project_menu(manager):
    while True:
        project = manager.store.get()
        show_panel("Project", f"Current project: {project or 'none installed'}")

        choices = [
            "📥 Install Project",
            "🔄 Update Project",
            "📊 Project Status",
            "📝 Project Logs",
            "🗄️  Update DB",
            "⬅️  Back to Main Menu"
        ]

        choice = select_from_list("Select action", choices)

        if "Back" in choice:
            break

        if "Install" in choice:
            install_project_menu(manager)
        elif "Update Project" in choice:
            update_project_menu(manager)
        elif "Status" in choice:
            project_status(manager)
        elif "Logs" in choice:
            project_logs(manager)
        elif "Update DB" in choice:
            update_db_menu(manager)


def install_project_menu(manager):
    show_panel("Install Project", f"Clone from github.com/{manager.settings.github_owner}")

    name = step_input("Enter project name (GitHub repo): ").strip()
    if not name:
        show_step_final("Project name is required", False)
        input("\nPress Enter...")
        return

    show_step(f"Installing {name}", "active")
    try:
        manager.install(name)
    except BuildFailedError as e:
        show_step_final(f"{name} cloned, but the build failed", False)
        show_failure(e)
        show_info("The project is installed. Fix the issue and run Update Project.")
    except XenzError as e:
        show_step_final("Install failed", False)
        show_failure(e)
    else:
        show_step_final(f"{name} installed and running", True)

    input("\nPress Enter...")


def update_project_menu(manager):
    show_panel("Update Project", "Backup, pull latest source and rebuild")

    try:
        result = manager.update()
    except XenzError as e:
        show_step_final("Update failed", False)
        show_failure(e)
    else:
        if result.backup:
            show_step(f"Backup created: {result.backup.name}")
        else:
            show_warning(f"Backup failed, update continued: {result.backup_error}")
        show_step_final(f"{result.project} updated", True)

    input("\nPress Enter...")


def project_status(manager):
    try:
        project_dir = manager.require_project_dir()
    except StateError as e:
        show_failure(e)
        input("\nPress Enter...")
        return

    show_panel("Project Status", project_dir.name)
    run_interactive(manager.compose_command('ps'), cwd=project_dir)
    input("\nPress Enter...")


def project_logs(manager):
    try:
        project_dir = manager.require_project_dir()
    except StateError as e:
        show_failure(e)
        input("\nPress Enter...")
        return

    show_panel("Project Logs", f"{project_dir.name} (Ctrl+C to stop)")
    run_interactive(manager.compose_command('logs', '-f', '--tail', '100'), cwd=project_dir)


def update_db_menu(manager):
    settings = manager.settings
    show_panel("Update DB", f"Run {' '.join(settings.db_command)} in {settings.db_container}")

    show_warning("This may wipe and reseed the database!")
    confirm = select_from_list("Are you sure?", ["✅ Yes, run it", "⬅️  Cancel"])
    if "Cancel" in confirm:
        show_info("Cancelled")
        input("Press Enter...")
        return

    code = run_interactive(['docker', 'exec', '-it', settings.db_container] + list(settings.db_command))
    manager.events.log_result(EventType.DB_UPDATE, settings.db_container, code == 0, exit_code=code)

    if code == 0:
        show_success("Database updated")
    else:
        show_failure(XenzError(f"docker exec exited with code {code}"))
    input("\nPress Enter...")
