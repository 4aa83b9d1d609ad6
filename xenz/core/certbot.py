# XENZ v1.0 - Certbot pass-through
import re
from dataclasses import dataclass, field
from typing import List

from xenz.core.errors import ExternalToolError
from xenz.utils.progress import run_command
from xenz.utils.validation import validate_domain


@dataclass
class Certificate:
    name: str
    domains: List[str] = field(default_factory=list)
    expiry: str = ''
    validity: str = ''

    @property
    def is_valid(self) -> bool:
        return self.validity.upper().startswith('VALID')


_EXPIRY_RE = re.compile(r'^(?P<date>.*?)\s*\((?P<validity>[^)]*)\)\s*$')


def parse_certificates(output: str) -> List[Certificate]:
    '''Parse ``certbot certificates`` text.

    Each block starts at "Certificate Name:"; only the name, domains and
    expiry lines are read, everything else is skipped.
    '''
    certs = []
    current = None

    for raw in (output or '').splitlines():
        line = raw.strip()
        if ':' not in line:
            continue
        key, value = line.split(':', 1)
        key, value = key.strip(), value.strip()

        if key == 'Certificate Name':
            current = Certificate(name=value)
            certs.append(current)
        elif current is None:
            continue
        elif key == 'Domains':
            current.domains = value.split()
        elif key == 'Expiry Date':
            match = _EXPIRY_RE.match(value)
            if match:
                current.expiry = match.group('date')
                current.validity = match.group('validity')
            else:
                current.expiry = value

    return certs


def issue_command(domain: str, email: str) -> List[str]:
    '''certbot standalone issuance for the domain and its www alias'''
    domain = validate_domain(domain)
    return [
        'certbot', 'certonly', '--standalone',
        '-d', domain, '-d', f'www.{domain}',
        '--agree-tos', '--email', email, '--non-interactive',
    ]


def _checked(command, result, what):
    if result.returncode != 0:
        raise ExternalToolError(
            f"{what} failed",
            command=command, returncode=result.returncode,
            output=result.stderr or result.stdout,
        )
    return result


def renew(run=run_command):
    command = ['certbot', 'renew']
    return _checked(command, run(command, "Renewing certificates"), "certbot renew")


def issue(domain: str, email: str, run=run_command):
    '''Validate first, so a bad domain never reaches certbot'''
    command = issue_command(domain, email)
    return _checked(command, run(command, f"Issuing certificate for {command[4]}"), "certbot certonly")


def list_certificates(run=run_command) -> List[Certificate]:
    command = ['certbot', 'certificates']
    result = _checked(command, run(command, "Reading certificates"), "certbot certificates")
    return parse_certificates(result.stdout)
