from rich.table import Table

from xenz.cli.ui import (
    console, select_from_list, show_failure, show_info, show_panel,
    show_step_final, show_warning, step_input,
)
from xenz.core import certbot
from xenz.core.errors import XenzError
from xenz.utils.event_log import EventType


def show_ssl_menu(manager):
    while True:
        show_panel("SSL Certificates", "Certbot standalone (binds ports 80/443)")

        choices = [
            "🔄 Renew Certificates",
            "🔐 Issue Certificate for Domain",
            "📋 List Certificates",
            "⬅️  Back to Main Menu"
        ]

        choice = select_from_list("Select action", choices)

        if "Back" in choice:
            break

        if "Renew" in choice:
            renew_menu(manager)
        elif "Issue" in choice:
            issue_menu(manager)
        elif "List" in choice:
            list_certificates_menu(manager)


def renew_menu(manager):
    show_panel("Renew Certificates", "certbot renew")
    try:
        certbot.renew(manager.run)
    except XenzError as e:
        manager.events.log_result(EventType.SSL_RENEW, 'all', False)
        show_step_final("Renewal failed", False)
        show_failure(e)
    else:
        manager.events.log_result(EventType.SSL_RENEW, 'all', True)
        show_step_final("Certificates renewed", True)
    input("\nPress Enter...")


def issue_menu(manager):
    show_panel("Issue Certificate", "Issues for the domain and its www alias")

    domain = step_input("Enter your domain (e.g. example.com): ").strip()
    try:
        certbot.issue(domain, manager.settings.certbot_email, manager.run)
    except XenzError as e:
        manager.events.log_result(EventType.SSL_ISSUE, domain, False, error=type(e).__name__)
        show_step_final("Issuance failed", False)
        show_failure(e)
    else:
        manager.events.log_result(EventType.SSL_ISSUE, domain, True)
        show_step_final(f"Certificate issued for {domain}", True)
    input("\nPress Enter...")


def list_certificates_menu(manager):
    try:
        certs = certbot.list_certificates(manager.run)
    except XenzError as e:
        show_failure(e)
        input("\nPress Enter...")
        return

    if not certs:
        show_warning("No certificates found!")
        input("\nPress Enter...")
        return

    table = Table(title="🔐 Certificates", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="cyan")
    table.add_column("Domains", style="white")
    table.add_column("Expiry", style="white")
    table.add_column("Status")

    for cert in certs:
        status = f"[green]{cert.validity}[/green]" if cert.is_valid else f"[red]{cert.validity or 'unknown'}[/red]"
        table.add_row(cert.name, ', '.join(cert.domains), cert.expiry, status)

    console.print()
    console.print(table)
    show_info(f"{len(certs)} certificates")
    input("\nPress Enter...")
