"""Tests for the project lifecycle manager."""

import tarfile

import pytest

from tests.conftest import FakeRunner, snapshot
from xenz.core.errors import (
    ArchiveFailedError, BuildFailedError, CloneFailedError, InvalidNameError,
    InvalidSelectionError, NoBackupsError, NoProjectError, ProjectDirMissingError,
    ProjectExistsError, PullFailedError, UserCancelled,
)
from xenz.core.lifecycle import DELETE_CONFIRMATION, parse_selection


BUILD = 'docker compose -f prod.docker-compose.yml up -d --build --remove-orphans'


# -- install -------------------------------------------------------------


@pytest.mark.parametrize("name", ["myapp", "My_App-2", "9", "a-b_c"])
def test_install_then_get_project_returns_name(manager, name):
    manager.install(name)
    assert manager.get_project() == name
    assert manager.paths.project_file.read_text().strip() == name


def test_install_clones_fixed_remote_then_builds(manager, runner, paths):
    manager.install('myapp')

    commands = runner.commands()
    assert commands[0] == f"git clone https://github.com/FarshadGhanbari/myapp.git {paths.root / 'myapp'}"
    assert commands[1] == BUILD
    assert runner.calls[1][1] == paths.root / 'myapp'
    assert (paths.root / 'myapp' / 'README.md').exists()


@pytest.mark.parametrize("name", ["", "my app", "../etc", "a/b", "name;rm", "café"])
def test_install_rejects_invalid_names(manager, runner, name):
    with pytest.raises(InvalidNameError):
        manager.install(name)
    assert runner.calls == []
    assert manager.store.get() is None


def test_second_install_is_rejected_and_leaves_state(installed, runner, paths):
    before = snapshot(paths.root / 'myapp')
    calls = len(runner.calls)

    with pytest.raises(ProjectExistsError):
        installed.install('myapp')

    assert installed.get_project() == 'myapp'
    assert snapshot(paths.root / 'myapp') == before
    assert len(runner.calls) == calls


def test_install_refuses_existing_directory(manager, runner, paths):
    (paths.root / 'other').mkdir()
    with pytest.raises(ProjectExistsError):
        manager.install('other')
    assert runner.calls == []


def test_clone_failure_writes_no_state(paths, clock, catalog):
    from xenz.core.lifecycle import ProjectManager

    runner = FakeRunner(fail_on={'git clone': 128})
    manager = ProjectManager(paths, catalog=catalog, run=runner,
                             compose_cmd=['docker', 'compose'], clock=clock)

    with pytest.raises(CloneFailedError) as exc:
        manager.install('myapp')

    assert exc.value.returncode == 128
    assert 'boom' in exc.value.output
    assert not paths.project_file.exists()
    assert len(runner.calls) == 1


def test_install_under_relative_root_clones_into_root(monkeypatch, tmp_path, clock):
    from pathlib import Path

    from xenz.config import XenzPaths
    from xenz.core.lifecycle import ProjectManager

    monkeypatch.chdir(tmp_path)
    paths = XenzPaths(Path('srv'))
    paths.ensure_dirs()
    runner = FakeRunner()
    manager = ProjectManager(paths, run=runner, compose_cmd=['docker', 'compose'], clock=clock)

    manager.install('myapp')

    assert (tmp_path / 'srv' / 'myapp' / 'README.md').exists()
    assert not (tmp_path / 'srv' / 'srv').exists()
    assert manager.require_project_dir() == paths.project_dir('myapp')
    manager.backup()


def test_build_failure_keeps_pointer(manager, runner):
    runner.fail_on['up -d'] = 1

    with pytest.raises(BuildFailedError):
        manager.install('myapp')

    assert manager.get_project() == 'myapp'


def test_get_project_without_pointer(manager):
    with pytest.raises(NoProjectError):
        manager.get_project()


# -- update --------------------------------------------------------------


def test_update_requires_project(manager, runner):
    with pytest.raises(NoProjectError):
        manager.update()
    assert runner.calls == []


def test_update_requires_directory(manager, runner):
    manager.store.set('ghost')
    with pytest.raises(ProjectDirMissingError):
        manager.update()
    assert runner.calls == []


def test_update_backs_up_pulls_and_rebuilds(installed, runner, paths):
    runner.calls.clear()

    result = installed.update()

    assert result.project == 'myapp'
    assert result.backup is not None
    assert result.backup.path.exists()
    assert runner.commands() == ['git pull', BUILD]
    assert all(cwd == paths.root / 'myapp' for _, cwd in runner.calls)


def test_update_continues_when_backup_fails(installed, runner, monkeypatch):
    def broken_create(*args, **kwargs):
        raise ArchiveFailedError("disk full")

    monkeypatch.setattr(installed.catalog, 'create', broken_create)
    runner.calls.clear()

    result = installed.update()

    assert result.backup is None
    assert result.backup_error == "disk full"
    assert runner.commands() == ['git pull', BUILD]


def test_update_pull_failure_skips_build(installed, runner):
    runner.calls.clear()
    runner.fail_on['git pull'] = 1

    with pytest.raises(PullFailedError):
        installed.update()

    assert runner.commands() == ['git pull']


def test_update_build_failure(installed, runner):
    runner.fail_on['up -d'] = 17

    with pytest.raises(BuildFailedError) as exc:
        installed.update()
    assert exc.value.returncode == 17


# -- backup / list -------------------------------------------------------


def test_backup_requires_project(manager):
    with pytest.raises(NoProjectError):
        manager.backup()


def test_backup_name_and_relative_paths(installed, clock):
    backup = installed.backup()

    assert backup.name == 'backup-20260102-030405.tar.gz'
    with tarfile.open(backup.path, 'r:gz') as tar:
        names = tar.getnames()
    assert 'myapp' in names
    assert 'myapp/app/main.py' in names
    assert all(n == 'myapp' or n.startswith('myapp/') for n in names)


def test_list_reports_each_backup_and_total(installed, clock):
    for _ in range(3):
        installed.backup()
        clock.advance(1)

    backups = installed.list_backups()

    assert len(backups) == 3
    assert [b.name for b in backups] == sorted(b.name for b in backups)
    assert installed.catalog.total_size(backups) == sum(b.path.stat().st_size for b in backups)


def test_backups_in_same_second_collide(installed):
    installed.backup()
    installed.backup()

    assert len(installed.list_backups()) == 1


# -- restore -------------------------------------------------------------


def test_backup_restore_round_trip(installed, paths, clock):
    project = paths.root / 'myapp'
    (project / 'data.bin').write_bytes(bytes(range(256)) * 8)
    before = snapshot(project)

    installed.backup()
    (project / 'README.md').write_text("changed\n")
    (project / 'app' / 'main.py').unlink()
    (project / 'data.bin').write_bytes(b'')

    restored = installed.restore(lambda backups: '1', lambda backup: 'y')

    assert restored.name == 'backup-20260102-030405.tar.gz'
    assert snapshot(project) == before


def test_restore_without_backups(installed):
    def choose(backups):
        raise AssertionError("must not prompt")

    with pytest.raises(NoBackupsError):
        installed.restore(choose, choose)


def test_restore_cancel_entry(installed, paths):
    installed.backup()
    (paths.root / 'myapp' / 'README.md').write_text("changed\n")

    with pytest.raises(UserCancelled):
        installed.restore(lambda backups: str(len(backups) + 1), lambda backup: 'y')

    assert (paths.root / 'myapp' / 'README.md').read_text() == "changed\n"


@pytest.mark.parametrize("answer", ["n", "", "yes", "N"])
def test_restore_requires_y(installed, paths, answer):
    installed.backup()
    (paths.root / 'myapp' / 'README.md').write_text("changed\n")

    with pytest.raises(UserCancelled):
        installed.restore(lambda backups: '1', lambda backup: answer)

    assert (paths.root / 'myapp' / 'README.md').read_text() == "changed\n"


def test_restore_accepts_upper_case_y(installed, paths):
    installed.backup()
    (paths.root / 'myapp' / 'README.md').write_text("changed\n")

    installed.restore(lambda backups: '1', lambda backup: 'Y')

    assert (paths.root / 'myapp' / 'README.md').read_text() == "# demo\n"


@pytest.mark.parametrize("answer", ["0", "3", "abc", "", "-1", "²", "٣"])
def test_restore_invalid_selection(installed, answer):
    installed.backup()

    with pytest.raises(InvalidSelectionError):
        installed.restore(lambda backups: answer, lambda backup: 'y')


def test_parse_selection():
    assert parse_selection('1', 3) == 0
    assert parse_selection(' 3 ', 3) == 2
    assert parse_selection('4', 3) is None
    with pytest.raises(InvalidSelectionError):
        parse_selection('5', 3)
    with pytest.raises(InvalidSelectionError):
        parse_selection('²', 3)


# -- delete_all ----------------------------------------------------------


def _make_backups(manager, clock, count):
    for _ in range(count):
        manager.backup()
        clock.advance(2)


@pytest.mark.parametrize("answer", ["delete", "y", "", "Delete", "DELETE ALL"])
def test_delete_all_requires_exact_token(installed, clock, answer):
    _make_backups(installed, clock, 2)

    with pytest.raises(UserCancelled):
        installed.delete_all(lambda count, total: answer)

    assert len(installed.list_backups()) == 2


def test_delete_all_removes_every_backup(installed, clock):
    _make_backups(installed, clock, 3)
    expected_total = installed.catalog.total_size(installed.list_backups())
    seen = {}

    def confirm(count, total):
        seen.update(count=count, total=total)
        return DELETE_CONFIRMATION

    result = installed.delete_all(confirm)

    assert seen == {'count': 3, 'total': expected_total}
    assert result.deleted == 3
    assert result.failed == 0
    assert result.total_size == expected_total
    assert installed.list_backups() == []


def test_delete_all_tolerates_individual_failures(installed, clock, monkeypatch):
    _make_backups(installed, clock, 3)
    original = installed.catalog.delete
    attempts = []

    def flaky_delete(backup):
        attempts.append(backup.name)
        if len(attempts) == 1:
            raise PermissionError("read-only")
        original(backup)

    monkeypatch.setattr(installed.catalog, 'delete', flaky_delete)

    result = installed.delete_all(lambda count, total: DELETE_CONFIRMATION)

    assert len(attempts) == 3
    assert result.deleted == 2
    assert result.failed == 1
    assert len(installed.list_backups()) == 1


def test_delete_all_without_backups(installed):
    with pytest.raises(NoBackupsError):
        installed.delete_all(lambda count, total: DELETE_CONFIRMATION)


# -- event log -----------------------------------------------------------


def test_actions_are_logged(installed, runner, clock):
    installed.backup()
    runner.fail_on['git pull'] = 1
    with pytest.raises(PullFailedError):
        installed.update()

    lines = installed.events.get_recent_lines()
    assert any(' INSTALL myapp (status=success' in line for line in lines)
    assert any(' BACKUP myapp (status=success, file=backup-' in line for line in lines)
    assert any(' UPDATE myapp (status=failed, error=PullFailedError, exit_code=1)' in line for line in lines)


def test_empty_backup_set_is_logged(manager):
    with pytest.raises(NoBackupsError):
        manager.restore(lambda backups: '1', lambda backup: 'y')
    with pytest.raises(NoBackupsError):
        manager.delete_all(lambda count, total: DELETE_CONFIRMATION)

    lines = manager.events.get_recent_lines()
    assert any(' RESTORE (status=failed, error=NoBackupsError)' in line for line in lines)
    assert any(' DELETE_BACKUPS (status=failed, error=NoBackupsError)' in line for line in lines)
