"""Tests for the append-only event log."""

from datetime import datetime

import pytest

from xenz.utils.event_log import EventLogger, EventType


@pytest.fixture
def logger(tmp_path, monkeypatch):
    monkeypatch.setattr('xenz.utils.event_log.getpass.getuser', lambda: 'ops')
    return EventLogger(tmp_path / 'logs' / 'xenz.log', clock=lambda: datetime(2026, 1, 2, 3, 4, 5))


def test_log_event_line_format(logger):
    logger.log_event(EventType.BACKUP, 'myapp', {'status': 'success', 'file': 'backup-x.tar.gz'})

    assert logger.log_file.read_text() == (
        "[2026-01-02T03:04:05] [ops] BACKUP myapp (status=success, file=backup-x.tar.gz)\n"
    )


def test_log_result_drops_none_details(logger):
    logger.log_result(EventType.SSL_RENEW, 'all', False, exit_code=None, error='ExternalToolError')
    assert logger.get_recent_lines() == [
        "[2026-01-02T03:04:05] [ops] SSL_RENEW all (status=failed, error=ExternalToolError)"
    ]


def test_log_is_append_only(logger):
    logger.log_event(EventType.INSTALL, 'a')
    logger.log_event(EventType.UPDATE, 'a')
    assert [line.split('] ')[-1] for line in logger.get_recent_lines()] == ['INSTALL a', 'UPDATE a']


def test_recent_lines_limit(logger):
    for i in range(5):
        logger.log_event(EventType.BACKUP, f'p{i}')
    lines = logger.get_recent_lines(limit=2)
    assert [line.split()[-1] for line in lines] == ['p3', 'p4']


def test_recent_lines_without_file(tmp_path):
    assert EventLogger(tmp_path / 'none.log').get_recent_lines() == []


def test_unwritable_log_does_not_raise(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('file, not a directory')
    EventLogger(blocker / 'xenz.log').log_event(EventType.INSTALL, 'myapp')
