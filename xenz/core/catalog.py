# XENZ v1.0 - Backup archives on disk
"""Backup catalog.

The backups directory is the only index: every listing rescans it, so there
is nothing to fall out of sync. Size and date come from filesystem metadata
via an ordered list of probes (GNU stat, BSD stat, ``ls -ln``); the first
probe that answers wins and a file no probe can read shows ``N/A``.
"""
import logging
import tarfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from xenz.core.errors import ArchiveFailedError, ExtractFailedError
from xenz.utils.progress import run_command
from xenz.utils.validation import is_backup_filename

_log = logging.getLogger(__name__)

BACKUP_GLOB = 'backup-*.tar.gz'
TIMESTAMP_FORMAT = '%Y%m%d-%H%M%S'
NOT_AVAILABLE = 'N/A'

KB = 1024
MB = KB * 1024
GB = MB * 1024


def extraction_filter():
    '''``extractall`` keyword for the "tar" filter, where tarfile has one.

    Extraction filters arrived in 3.12 and the 3.10.12/3.11.4 security
    releases; older interpreters take no ``filter`` argument at all.
    '''
    if hasattr(tarfile, 'tar_filter'):
        return {'filter': 'tar'}
    return {}


class ProbeError(Exception):
    pass


Metadata = Tuple[int, datetime]
Probe = Callable[[Path, Callable], Metadata]


def _probe_output(command, run) -> str:
    result = run(command)
    if result.returncode != 0 or not result.stdout.strip():
        raise ProbeError(f"{command[0]} exited {result.returncode}")
    return result.stdout.strip()


def _parse_size_epoch(output) -> Metadata:
    try:
        size, epoch = output.split()[:2]
        return int(size), datetime.fromtimestamp(int(epoch))
    except ValueError as e:
        raise ProbeError(f"Unexpected stat output: {output!r}") from e


def gnu_stat_probe(path: Path, run) -> Metadata:
    return _parse_size_epoch(_probe_output(['stat', '-c', '%s %Y', str(path)], run))


def bsd_stat_probe(path: Path, run) -> Metadata:
    return _parse_size_epoch(_probe_output(['stat', '-f', '%z %m', str(path)], run))


def ls_probe(path: Path, run, now: Optional[datetime] = None) -> Metadata:
    '''Parse ``ls -ln``: mode links uid gid size month day time|year name'''
    fields = _probe_output(['ls', '-ln', str(path)], run).split()
    if len(fields) < 8:
        raise ProbeError(f"Unexpected ls output: {' '.join(fields)!r}")

    try:
        size = int(fields[4])
        month, day, clock_or_year = fields[5], fields[6], fields[7]
        if ':' in clock_or_year:
            now = now or datetime.now()
            modified = datetime.strptime(f"{now.year} {month} {day} {clock_or_year}", '%Y %b %d %H:%M')
            # ls shows HH:MM only for files from the last six months
            if modified > now:
                modified = modified.replace(year=now.year - 1)
        else:
            modified = datetime.strptime(f"{clock_or_year} {month} {day}", '%Y %b %d')
    except ValueError as e:
        raise ProbeError(f"Unexpected ls output: {' '.join(fields)!r}") from e

    return size, modified


DEFAULT_PROBES: List[Probe] = [gnu_stat_probe, bsd_stat_probe, ls_probe]


def probe_metadata(path: Path, probes=None, run=run_command):
    '''Return (size, modified) from the first probe that succeeds, else (None, None)'''
    for probe in probes if probes is not None else DEFAULT_PROBES:
        try:
            return probe(path, run)
        except ProbeError as e:
            _log.debug("%s failed for %s: %s", probe.__name__, path, e)
    return None, None


def format_size(size_bytes: Optional[int]) -> str:
    '''Human readable size in the style of ``ls -h``'''
    if size_bytes is None:
        return NOT_AVAILABLE
    if size_bytes < KB:
        return f"{size_bytes}B"
    for unit, factor in (('G', GB), ('M', MB), ('K', KB)):
        if size_bytes >= factor:
            return f"{size_bytes / factor:.1f}{unit}"


def format_total(size_bytes: int) -> str:
    '''Coarsest non-zero unit: GB, else MB, else KB'''
    if size_bytes >= GB:
        return f"{size_bytes / GB:.2f} GB"
    if size_bytes >= MB:
        return f"{size_bytes / MB:.2f} MB"
    return f"{size_bytes / KB:.2f} KB"


@dataclass
class Backup:
    path: Path
    size: Optional[int] = None
    modified: Optional[datetime] = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size_display(self) -> str:
        return format_size(self.size)

    @property
    def date_display(self) -> str:
        if self.modified is None:
            return NOT_AVAILABLE
        return self.modified.strftime('%Y-%m-%d %H:%M:%S')


class BackupCatalog:
    def __init__(self, backup_dir: Path, probes=None, run=run_command):
        self.backup_dir = Path(backup_dir)
        self.probes = probes
        self.run = run

    def path_for(self, timestamp: datetime) -> Path:
        return self.backup_dir / f"backup-{timestamp.strftime(TIMESTAMP_FORMAT)}.tar.gz"

    def list(self) -> List[Backup]:
        '''Backups ordered by filename, which is creation order'''
        if not self.backup_dir.is_dir():
            return []

        backups = []
        for path in sorted(self.backup_dir.glob(BACKUP_GLOB)):
            if not is_backup_filename(path.name):
                continue
            size, modified = probe_metadata(path, self.probes, self.run)
            backups.append(Backup(path, size, modified))
        return backups

    @staticmethod
    def total_size(backups: List[Backup]) -> int:
        return sum(b.size for b in backups if b.size is not None)

    def create(self, source_dir: Path, root: Path, timestamp: datetime) -> Backup:
        '''Archive ``source_dir`` with paths relative to ``root``.

        An archive with the same timestamp is overwritten.
        '''
        archive = self.path_for(timestamp)
        arcname = str(Path(source_dir).relative_to(root))

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            with tarfile.open(archive, 'w:gz') as tar:
                tar.add(source_dir, arcname=arcname)
        except (OSError, tarfile.TarError) as e:
            if archive.exists():
                archive.unlink()
            raise ArchiveFailedError(f"Failed to create {archive.name}: {e}", output=str(e)) from e

        size, modified = probe_metadata(archive, self.probes, self.run)
        return Backup(archive, size, modified)

    def extract(self, backup: Backup, target: Path):
        '''Extract into ``target``, overwriting files in place'''
        try:
            with tarfile.open(backup.path, 'r:gz') as tar:
                tar.extractall(target, **extraction_filter())
        except (OSError, tarfile.TarError) as e:
            raise ExtractFailedError(f"Failed to extract {backup.name}: {e}", output=str(e)) from e

    def delete(self, backup: Backup):
        backup.path.unlink()
