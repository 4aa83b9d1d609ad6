# XENZ v1.0 - Project lifecycle: install, update, backup, restore
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from xenz.config import Settings, XenzPaths
from xenz.core.catalog import Backup, BackupCatalog
from xenz.core.errors import (
    BuildFailedError, CloneFailedError, InvalidSelectionError, NoBackupsError,
    NoProjectError, ProjectDirMissingError, ProjectExistsError, PullFailedError,
    UserCancelled, XenzError,
)
from xenz.core.store import FileProjectStore, ProjectStore
from xenz.utils.event_log import EventLogger, EventType
from xenz.utils.progress import filter_docker_errors, run_command
from xenz.utils.validation import validate_project_name

_log = logging.getLogger(__name__)

DELETE_CONFIRMATION = 'DELETE'


@dataclass
class UpdateResult:
    project: str
    backup: Optional[Backup] = None
    backup_error: Optional[str] = None


@dataclass
class DeleteResult:
    deleted: int
    failed: int
    total_size: int


def parse_selection(raw, count: int) -> Optional[int]:
    '''Map a 1-indexed menu answer to a list index.

    ``count + 1`` is the Cancel entry and maps to None.
    '''
    text = str(raw).strip() if raw is not None else ''
    # str.isdigit() also accepts superscripts and non-ASCII digits int() rejects
    if not (text.isascii() and text.isdigit()):
        raise InvalidSelectionError(f"Invalid selection: {text!r}")

    choice = int(text)
    if choice == count + 1:
        return None
    if not 1 <= choice <= count:
        raise InvalidSelectionError(f"Selection must be between 1 and {count + 1}")
    return choice - 1


class ProjectManager:
    '''Owns the current project pointer and its backups.

    External commands go through ``run(command, message, cwd)`` so menus can
    pass a spinner-wrapped runner and tests a recording fake.
    '''

    def __init__(
        self,
        paths: XenzPaths,
        settings: Optional[Settings] = None,
        store: Optional[ProjectStore] = None,
        catalog: Optional[BackupCatalog] = None,
        events: Optional[EventLogger] = None,
        run: Callable = run_command,
        compose_cmd: Optional[List[str]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.paths = paths
        self.settings = settings or Settings()
        self.store = store or FileProjectStore(paths.project_file)
        self.catalog = catalog or BackupCatalog(paths.backup_dir)
        self.events = events or EventLogger(paths.log_file)
        self.run = run
        self._compose_cmd = compose_cmd
        self.clock = clock

    @property
    def compose_cmd(self) -> List[str]:
        if self._compose_cmd is None:
            from xenz.utils.docker_utils import get_docker_compose_command
            self._compose_cmd = get_docker_compose_command()
        return self._compose_cmd

    def compose_command(self, *args) -> List[str]:
        return self.compose_cmd + ['-f', self.settings.compose_file] + list(args)

    @contextmanager
    def _recorded(self, event_type: EventType, subject: str = ''):
        '''Write one event line for the wrapped action, whatever its outcome.
        The yielded dict collects details; its "subject" key overrides ``subject``.
        '''
        record = {}
        try:
            yield record
        except UserCancelled:
            self.events.log_event(event_type, record.pop('subject', subject), {'status': 'cancelled'})
            raise
        except XenzError as e:
            details = {'status': 'failed', 'error': type(e).__name__}
            if getattr(e, 'returncode', None) is not None:
                details['exit_code'] = e.returncode
            self.events.log_event(event_type, record.pop('subject', subject), details)
            raise
        else:
            subject = record.pop('subject', subject)
            self.events.log_result(event_type, subject, True, **record)

    # -- project pointer -------------------------------------------------

    def get_project(self) -> str:
        name = self.store.get()
        if not name:
            raise NoProjectError()
        return name

    def require_project_dir(self) -> Path:
        '''Current project directory; NoProject or DirMissing otherwise'''
        project_dir = self.paths.project_dir(self.get_project())
        if not project_dir.is_dir():
            raise ProjectDirMissingError(project_dir)
        return project_dir

    # -- lifecycle ---------------------------------------------------------

    def install(self, project_name: str) -> str:
        '''Clone the project, record it as current, then build and start it.

        The pointer is written right after a successful clone, so a failed
        first build still leaves the project installed; rerun update().
        '''
        with self._recorded(EventType.INSTALL, str(project_name or '')) as record:
            name = validate_project_name(project_name)
            record['subject'] = name
            target = self.paths.project_dir(name)
            if target.exists():
                raise ProjectExistsError(target)

            url = self.settings.repo_url(name)
            command = ['git', 'clone', url, str(target.absolute())]
            result = self.run(command, f"Cloning {url}", cwd=self.paths.root)
            if result.returncode != 0:
                raise CloneFailedError(
                    f"git clone failed for {url}",
                    command=command, returncode=result.returncode,
                    output=result.stderr or result.stdout,
                )

            self.store.set(name)
            _log.debug("Project pointer set to %s", name)

            self._build(target)
        return name

    def update(self) -> UpdateResult:
        '''Back up (best effort), pull and rebuild the current project.'''
        with self._recorded(EventType.UPDATE) as record:
            project_dir = self.require_project_dir()
            result = UpdateResult(project=project_dir.name)
            record['subject'] = result.project

            try:
                result.backup = self.backup()
            except XenzError as e:
                result.backup_error = str(e)
                _log.warning("Backup before update failed, continuing: %s", e)

            command = ['git', 'pull']
            pulled = self.run(command, "Pulling latest changes", cwd=project_dir)
            if pulled.returncode != 0:
                raise PullFailedError(
                    f"git pull failed in {project_dir}",
                    command=command, returncode=pulled.returncode,
                    output=pulled.stderr or pulled.stdout,
                )

            self._build(project_dir)
            if result.backup is not None:
                record['backup'] = result.backup.name
        return result

    def _build(self, project_dir: Path):
        command = self.compose_command('up', '-d', '--build', '--remove-orphans')
        result = self.run(command, "Building and starting containers", cwd=project_dir)
        if result.returncode != 0:
            raise BuildFailedError(
                f"docker compose build failed in {project_dir}",
                command=command, returncode=result.returncode,
                output=filter_docker_errors(result.stderr) or result.stdout,
            )

    # -- backups -----------------------------------------------------------

    def backup(self) -> Backup:
        '''Archive the whole project directory, named by the current second.'''
        with self._recorded(EventType.BACKUP) as record:
            project_dir = self.require_project_dir()
            record['subject'] = project_dir.name
            backup = self.catalog.create(project_dir, self.paths.root, self.clock())
            record['file'] = backup.name
        return backup

    def list_backups(self) -> List[Backup]:
        return self.catalog.list()

    def restore(self, choose: Callable[[List[Backup]], str], confirm: Callable[[Backup], str]) -> Backup:
        '''Extract a chosen backup over the install root.

        ``choose`` gets the backups and returns the raw 1-indexed answer
        (``len + 1`` cancels); ``confirm`` must return "y" or "Y".
        Extraction overwrites in place and is not rolled back on failure.
        '''
        with self._recorded(EventType.RESTORE) as record:
            backups = self.catalog.list()
            if not backups:
                raise NoBackupsError()

            index = parse_selection(choose(backups), len(backups))
            if index is None:
                raise UserCancelled("Restore cancelled")

            backup = backups[index]
            record['subject'] = backup.name
            if (confirm(backup) or '').strip() not in ('y', 'Y'):
                raise UserCancelled("Restore cancelled")

            self.catalog.extract(backup, self.paths.root)
        return backup

    def delete_all(self, confirm: Callable[[int, int], str]) -> DeleteResult:
        '''Delete every backup after the operator types DELETE.

        ``confirm`` receives the backup count and total size in bytes.
        Individual failures are skipped; only successes are counted.
        '''
        with self._recorded(EventType.DELETE_BACKUPS) as record:
            backups = self.catalog.list()
            if not backups:
                raise NoBackupsError()

            total = self.catalog.total_size(backups)
            if confirm(len(backups), total) != DELETE_CONFIRMATION:
                raise UserCancelled("Deletion cancelled")

            deleted = failed = 0
            for backup in backups:
                try:
                    self.catalog.delete(backup)
                    deleted += 1
                except OSError as e:
                    failed += 1
                    _log.warning("Could not delete %s: %s", backup.name, e)

            record.update(deleted=deleted, failed=failed)
        return DeleteResult(deleted=deleted, failed=failed, total_size=total)
