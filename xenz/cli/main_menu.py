from xenz.cli.backup_menu import show_backup_menu
from xenz.cli.docker_menu import show_docker_menu
from xenz.cli.project_menu import show_project_menu
from xenz.cli.ssl_menu import show_ssl_menu
from xenz.cli.system_menu import show_event_log, show_system_stats
from xenz.cli.ui import select_from_list, show_failure, show_panel, show_success
from xenz.core.errors import XenzError
from xenz.utils.event_log import EventType
from xenz.utils.progress import run_interactive


def github_login(manager):
    show_panel("GitHub Auth Login", "Device flow handled by gh")
    code = run_interactive(['gh', 'auth', 'login'])
    manager.events.log_result(EventType.GITHUB_LOGIN, 'github.com', code == 0, exit_code=code)
    if code == 0:
        show_success("Logged in to GitHub")
    else:
        show_failure(XenzError(f"gh auth login exited with code {code}"))
    input("\nPress Enter...")


def run_main_loop(manager):
    '''Main application loop'''

    while True:
        project = manager.store.get()
        subtitle = f"Project: {project}" if project else "No project installed"
        show_panel("XENZ TOOL MENU", subtitle)

        choices = [
            "📦 Project",
            "💾 Backup & Restore",
            "🔐 SSL Certificates",
            "🐳 Docker",
            "🔑 GitHub Auth Login",
            "📊 System Stats",
            "📝 Event Log",
            "❌ Exit"
        ]

        choice = select_from_list("Main Menu", choices)

        if "Project" in choice:
            show_project_menu(manager)
        elif "Backup" in choice:
            show_backup_menu(manager)
        elif "SSL" in choice:
            show_ssl_menu(manager)
        elif "Docker" in choice:
            show_docker_menu(manager)
        elif "GitHub" in choice:
            github_login(manager)
        elif "System Stats" in choice:
            show_system_stats()
        elif "Event Log" in choice:
            show_event_log(manager)
        elif "Exit" in choice:
            print("\n👋 Goodbye.\n")
            break
