import logging
import os
import sys

from rich.logging import RichHandler

from xenz.cli.ui import console, show_error


def setup_logging():
    level = logging.DEBUG if os.environ.get('XENZ_DEBUG') else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)]
    )


def build_manager():
    from xenz.config import get_paths, load_settings
    from xenz.core.lifecycle import ProjectManager
    from xenz.utils.progress import run_command_with_progress

    paths = get_paths()
    paths.ensure_dirs()
    return ProjectManager(paths, load_settings(paths.settings_file), run=run_command_with_progress)


def main():
    '''Entry point for the interactive xenz menu'''
    setup_logging()

    from xenz.config import ConfigError
    try:
        manager = build_manager()
    except ConfigError as e:
        show_error(str(e))
        return 1

    from xenz.cli.main_menu import run_main_loop
    try:
        run_main_loop(manager)
    except KeyboardInterrupt:
        print("\n👋 Goodbye.\n")
    return 0


def setup_main():
    '''Entry point for xenz-setup: install Docker, GitHub CLI and Certbot'''
    setup_logging()

    from xenz.utils.system import check_sudo
    check_sudo()

    from xenz.cli.bootstrap import run_bootstrap
    return run_bootstrap()


if __name__ == "__main__":
    sys.exit(main())
