# XENZ v1.0 - Host bootstrap: Docker, GitHub CLI, Certbot
from pathlib import Path

from rich.table import Table

from xenz.cli.ui import console, show_error, show_info, show_result_panel, show_step, show_step_final
from xenz.core.errors import ExternalToolError, XenzError
from xenz.utils.progress import run_command, run_command_with_progress
from xenz.utils.system import (
    BASE_PACKAGES, DOCKER_KEYRING, DOCKER_PACKAGES, DOCKER_SOURCE_LIST, SUPPORTED_DISTROS,
    check_command_exists, detect_distro, docker_source_line, get_dpkg_architecture,
)

SUMMARY_TOOLS = [
    ('Docker', ['docker', '--version']),
    ('Docker Compose', ['docker', 'compose', 'version']),
    ('Docker Buildx', ['docker', 'buildx', 'version']),
    ('GitHub CLI', ['gh', '--version']),
    ('Certbot', ['certbot', '--version']),
]


class BootstrapError(ExternalToolError):
    pass


class UnsupportedDistroError(XenzError):
    def __init__(self, distro):
        self.distro = distro
        super().__init__(f"Unsupported distro: {distro}")


class Bootstrapper:
    '''Idempotent install sequence. Each step is skipped when its tool is present.'''

    def __init__(self, run=run_command_with_progress, probe=run_command,
                 exists=check_command_exists, source_list=DOCKER_SOURCE_LIST,
                 keyring=DOCKER_KEYRING):
        self.run = run
        self.probe = probe
        self.exists = exists
        self.source_list = Path(source_list)
        self.keyring = Path(keyring)

    @property
    def steps(self):
        return [
            ("Base packages", self.install_base),
            ("Docker Engine", self.install_docker),
            ("GitHub CLI", self.install_gh),
            ("Certbot", self.install_certbot),
        ]

    def _run(self, command, message):
        result = self.run(command, message)
        if result.returncode != 0:
            raise BootstrapError(
                f"{' '.join(command)} failed",
                command=command, returncode=result.returncode,
                output=result.stderr or result.stdout,
            )
        return result

    def apt_install(self, packages):
        self._run(['apt-get', 'install', '-y'] + list(packages), f"Installing {', '.join(packages)}")

    def install_base(self):
        self._run(['apt-get', 'update', '-y'], "Updating package index")
        self.apt_install(BASE_PACKAGES)
        return True

    def install_docker(self):
        if self.exists('docker'):
            return False

        distro, codename = detect_distro(self.probe)
        if distro not in SUPPORTED_DISTROS:
            raise UnsupportedDistroError(distro or 'unknown')

        self._run(['install', '-m', '0755', '-d', str(self.keyring.parent)], "Creating keyring directory")
        # distro is one of SUPPORTED_DISTROS, so the URL is fixed
        self._run(
            ['sh', '-c', f"curl -fsSL https://download.docker.com/linux/{distro}/gpg"
                         f" | gpg --dearmor --yes -o {self.keyring}"],
            "Adding Docker signing key"
        )
        self.source_list.parent.mkdir(parents=True, exist_ok=True)
        self.source_list.write_text(
            docker_source_line(distro, codename, get_dpkg_architecture(self.probe), self.keyring)
        )
        self._run(['apt-get', 'update', '-y'], "Updating package index")
        self.apt_install(DOCKER_PACKAGES)
        return True

    def install_gh(self):
        if self.exists('gh'):
            return False
        self.apt_install(['gh'])
        return True

    def install_certbot(self):
        if self.exists('certbot'):
            return False
        self.apt_install(['certbot'])
        return True

    def tool_versions(self):
        versions = {}
        for label, command in SUMMARY_TOOLS:
            result = self.probe(command)
            output = result.stdout.strip() if result.returncode == 0 else ''
            versions[label] = output.splitlines()[0] if output else 'not found'
        return versions

    def run_all(self):
        '''Run every step; stop at the first failure. Returns the exit status.

        The summary of installed tools is printed whatever happened.
        '''
        status = 0
        try:
            for name, step in self.steps:
                show_step(f"{name}...", "active")
                installed = step()
                show_step(f"{name} {'installed' if installed else 'already present'}")
        except ExternalToolError as e:
            show_step_final(f"{name} failed (exit code {e.returncode})", False)
            if e.output:
                console.print(e.output.strip()[-500:], style="dim red")
            status = e.returncode or 1
        except XenzError as e:
            show_step_final(f"{name} failed: {e}", False)
            status = 1
        else:
            show_step_final("Installation completed successfully", True)
        finally:
            self.print_summary()

        return status

    def print_summary(self):
        table = Table(show_header=False, border_style="cyan", padding=(0, 1))
        table.add_column("Tool", style="bold blue", width=16)
        table.add_column("Version", style="white")

        for label, version in self.tool_versions().items():
            table.add_row(label, version)
        table.add_row("Xenz", "Run [bold yellow]xenz[/bold yellow] to open the tool menu")

        show_result_panel(table, title="Installed Tools")


def run_bootstrap():
    show_info("Bootstrapping server: Docker, GitHub CLI, Certbot")
    try:
        return Bootstrapper().run_all()
    except KeyboardInterrupt:
        show_error("Interrupted")
        return 130
