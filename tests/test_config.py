"""Tests for path resolution and settings loading."""

from pathlib import Path

import pytest

from xenz.config import ConfigError, Settings, get_paths, load_settings


def test_paths_from_xenz_home(tmp_path):
    paths = get_paths({'XENZ_HOME': str(tmp_path)})

    assert paths.root == tmp_path
    assert paths.project_file == tmp_path / '.xenz' / 'project'
    assert paths.backup_dir == tmp_path / '.xenz' / 'backups'
    assert paths.log_file == tmp_path / '.xenz' / 'xenz.log'
    assert paths.project_dir('myapp') == tmp_path / 'myapp'


def test_paths_default_to_home(monkeypatch, tmp_path):
    monkeypatch.setattr(Path, 'home', classmethod(lambda cls: tmp_path))
    assert get_paths({}).root == tmp_path


def test_ensure_dirs(tmp_path):
    paths = get_paths({'XENZ_HOME': str(tmp_path)})
    paths.ensure_dirs()
    assert paths.backup_dir.is_dir()


def test_missing_settings_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / 'config.yml')
    assert settings == Settings()
    assert settings.compose_file == 'prod.docker-compose.yml'
    assert settings.repo_url('myapp') == 'https://github.com/FarshadGhanbari/myapp.git'


def test_settings_override_and_ignore_unknown(tmp_path):
    path = tmp_path / 'config.yml'
    path.write_text(
        "github_owner: acme\n"
        "certbot_email: ops@acme.io\n"
        "db_command: php artisan migrate --force\n"
        "colour: blue\n"
    )

    settings = load_settings(path)

    assert settings.github_owner == 'acme'
    assert settings.certbot_email == 'ops@acme.io'
    assert settings.db_command == ['php', 'artisan', 'migrate', '--force']
    assert settings.db_container == 'laravel'
    assert settings.repo_url('web') == 'https://github.com/acme/web.git'


def test_empty_settings_file(tmp_path):
    path = tmp_path / 'config.yml'
    path.write_text("")
    assert load_settings(path) == Settings()


@pytest.mark.parametrize("content", ["- a\n- b\n", "key: [unclosed\n"])
def test_bad_settings_file(tmp_path, content):
    path = tmp_path / 'config.yml'
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_settings(path)


def test_relative_xenz_home_is_made_absolute(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    paths = get_paths({'XENZ_HOME': 'srv'})

    assert paths.root.is_absolute()
    assert paths.root == tmp_path.resolve() / 'srv'
