# XENZ v1.0
import getpass
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path

_log = logging.getLogger(__name__)


class EventType(Enum):
    """Types of logged operator actions"""
    INSTALL = "INSTALL"
    UPDATE = "UPDATE"
    BACKUP = "BACKUP"
    RESTORE = "RESTORE"
    DELETE_BACKUPS = "DELETE_BACKUPS"
    SSL_RENEW = "SSL_RENEW"
    SSL_ISSUE = "SSL_ISSUE"
    DB_UPDATE = "DB_UPDATE"
    DOCKER_CLEANUP = "DOCKER_CLEANUP"
    GITHUB_LOGIN = "GITHUB_LOGIN"


class EventLogger:
    """
    Append-only text log of operator actions.
    One line per event: [timestamp] [user] TYPE subject (key=value, ...)
    """

    def __init__(self, log_file: Path, clock=datetime.now):
        self.log_file = Path(log_file)
        self._clock = clock

    def log_event(self, event_type: EventType, subject: str = '', details: dict = None):
        """Append an event line. A failed write never breaks the operation."""
        ts = self._clock().isoformat(timespec='seconds')
        line = f'[{ts}] [{self._get_current_user()}] {event_type.value}'
        if subject:
            line += f' {subject}'
        if details:
            line += ' (' + ', '.join(f'{k}={v}' for k, v in details.items()) + ')'

        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(line + '\n')
        except OSError as e:
            _log.warning("Could not write event log %s: %s", self.log_file, e)

    def log_result(self, event_type: EventType, subject: str, success: bool, **details):
        """Log an action outcome with status=success|failed"""
        payload = {'status': 'success' if success else 'failed'}
        payload.update({k: v for k, v in details.items() if v is not None})
        self.log_event(event_type, subject, payload)

    def _get_current_user(self):
        try:
            return getpass.getuser()
        except (KeyError, OSError):
            return "unknown"

    def get_recent_lines(self, limit=50):
        """Return the last ``limit`` lines, newest last"""
        if not self.log_file.exists():
            return []

        with open(self.log_file, 'r', encoding='utf-8', errors='replace') as f:
            lines = [line.rstrip('\n') for line in f if line.strip()]

        return lines[-limit:]
