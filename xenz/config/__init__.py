# XENZ v1.0
import os
import shlex
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml


class ConfigError(Exception):
    '''Raised when config.yml cannot be used'''


DEFAULT_GITHUB_OWNER = 'FarshadGhanbari'
DEFAULT_COMPOSE_FILE = 'prod.docker-compose.yml'


@dataclass(frozen=True)
class XenzPaths:
    '''Filesystem layout for one install root.

    Projects are cloned directly under ``root``; everything XENZ owns lives
    in ``root/.xenz``.
    '''
    root: Path

    @property
    def config_dir(self) -> Path:
        return self.root / '.xenz'

    @property
    def project_file(self) -> Path:
        return self.config_dir / 'project'

    @property
    def backup_dir(self) -> Path:
        return self.config_dir / 'backups'

    @property
    def log_file(self) -> Path:
        return self.config_dir / 'xenz.log'

    @property
    def settings_file(self) -> Path:
        return self.config_dir / 'config.yml'

    def project_dir(self, name: str) -> Path:
        return self.root / name

    def ensure_dirs(self):
        '''Create the config and backups directories'''
        self.backup_dir.mkdir(parents=True, exist_ok=True)


def get_paths(environ=None) -> XenzPaths:
    '''Resolve the install root: $XENZ_HOME if set, else the user's home'''
    environ = os.environ if environ is None else environ
    root = environ.get('XENZ_HOME')
    return XenzPaths(Path(root).expanduser().resolve() if root else Path.home())


@dataclass
class Settings:
    github_owner: str = DEFAULT_GITHUB_OWNER
    compose_file: str = DEFAULT_COMPOSE_FILE
    certbot_email: str = 'you@example.com'
    db_container: str = 'laravel'
    db_command: list = field(default_factory=lambda: ['php', 'artisan', 'db:fresh-seed'])

    def repo_url(self, project_name: str) -> str:
        return f"https://github.com/{self.github_owner}/{project_name}.git"


def load_settings(path: Path) -> Settings:
    '''Load settings from a YAML file, falling back to defaults.

    Missing file or missing keys keep the defaults, unknown keys are ignored.
    ``db_command`` may be given as a list or as a shell-style string.
    '''
    if not path.exists():
        return Settings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of settings")

    known = {f.name for f in fields(Settings)}
    values = {k: v for k, v in data.items() if k in known and v is not None}

    if isinstance(values.get('db_command'), str):
        values['db_command'] = shlex.split(values['db_command'])

    return Settings(**values)
