# XENZ v1.0 - Input validation
import re

from xenz.core.errors import InvalidNameError, ValidationError

PROJECT_NAME_RE = re.compile(r'^[a-zA-Z0-9_-]+$')

# One or more dot-separated labels, TLD alphabetic, no leading/trailing hyphen
DOMAIN_RE = re.compile(
    r'^(?=.{1,253}$)(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,63}$'
)

BACKUP_NAME_RE = re.compile(r'^backup-\d{8}-\d{6}\.tar\.gz$')


def validate_project_name(name):
    '''Validate a project (GitHub repository) name.
    Returns the stripped name or raises InvalidNameError.
    '''
    if not name or not isinstance(name, str):
        raise InvalidNameError("Project name is required")

    name = name.strip()

    if not PROJECT_NAME_RE.fullmatch(name):
        raise InvalidNameError(
            "Project name may only contain letters, digits, _ and -"
        )

    return name


def validate_domain(domain):
    '''Validate a bare domain such as example.com.
    A leading "www." is rejected because the www alias is added automatically.
    '''
    if not domain or not isinstance(domain, str):
        raise ValidationError("Domain is required")

    domain = domain.strip().lower()

    if domain.startswith('www.'):
        raise ValidationError("Enter the bare domain, www. is added automatically")

    if not DOMAIN_RE.fullmatch(domain):
        raise ValidationError(f"Invalid domain: {domain}")

    return domain


def is_backup_filename(filename):
    '''True for names produced by backup(): backup-YYYYMMDD-HHMMSS.tar.gz'''
    return bool(filename) and BACKUP_NAME_RE.fullmatch(filename) is not None
