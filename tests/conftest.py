"""Shared fixtures: temporary install root, fake command runner, fixed clock."""

import subprocess
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from xenz.config import Settings, XenzPaths
from xenz.core.catalog import BackupCatalog
from xenz.core.lifecycle import ProjectManager


class FakeRunner:
    """Records commands instead of running them.

    ``fail_on`` maps a substring of the joined command to an exit code.
    A successful ``git clone`` creates the target directory with a few files.
    """

    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = dict(fail_on or {})

    def __call__(self, command, message=None, cwd=None):
        command = list(command)
        self.calls.append((command, cwd))
        joined = ' '.join(command)

        code = 0
        for needle, exit_code in self.fail_on.items():
            if needle in joined:
                code = exit_code
                break

        if code == 0 and command[:2] == ['git', 'clone']:
            # git resolves a relative target against its working directory
            target = Path(cwd or '.') / command[3]
            (target / 'app').mkdir(parents=True)
            (target / 'README.md').write_text("# demo\n")
            (target / 'app' / 'main.py').write_text("print('hi')\n")

        return subprocess.CompletedProcess(
            command, code, stdout='', stderr=f"{command[0]}: boom" if code else ''
        )

    def commands(self):
        return [' '.join(command) for command, _ in self.calls]


class FakeClock:
    def __init__(self, start=datetime(2026, 1, 2, 3, 4, 5)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds=1):
        self.now += timedelta(seconds=seconds)


def os_stat_probe(path, run):
    st = path.stat()
    return st.st_size, datetime.fromtimestamp(st.st_mtime)


@pytest.fixture
def paths(tmp_path: Path) -> XenzPaths:
    root = tmp_path / 'home'
    root.mkdir()
    xenz_paths = XenzPaths(root)
    xenz_paths.ensure_dirs()
    return xenz_paths


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def catalog(paths: XenzPaths) -> BackupCatalog:
    return BackupCatalog(paths.backup_dir, probes=[os_stat_probe])


@pytest.fixture
def manager(paths, runner, clock, catalog) -> ProjectManager:
    return ProjectManager(
        paths,
        Settings(),
        catalog=catalog,
        run=runner,
        compose_cmd=['docker', 'compose'],
        clock=clock,
    )


@pytest.fixture
def installed(manager: ProjectManager) -> ProjectManager:
    """Manager with project ``myapp`` installed."""
    manager.install('myapp')
    return manager


def snapshot(directory: Path) -> dict:
    """Relative path -> bytes for every file under ``directory``."""
    return {
        str(p.relative_to(directory)): p.read_bytes()
        for p in sorted(directory.rglob('*')) if p.is_file()
    }
