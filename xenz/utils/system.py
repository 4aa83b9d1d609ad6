# XENZ v1.0
import os
import platform
import subprocess
import sys
import time

import psutil

from xenz.utils.progress import run_command

DOCKER_PACKAGES = [
    'docker-ce', 'docker-ce-cli', 'containerd.io',
    'docker-buildx-plugin', 'docker-compose-plugin',
]
BASE_PACKAGES = ['ca-certificates', 'curl', 'gnupg', 'lsb-release', 'git']
SUPPORTED_DISTROS = ('debian', 'ubuntu')
DOCKER_KEYRING = '/etc/apt/keyrings/docker.gpg'
DOCKER_SOURCE_LIST = '/etc/apt/sources.list.d/docker.list'


def get_platform():
    '''Detect platform (linux/windows/darwin)'''
    return platform.system().lower()


def is_linux():
    return get_platform() == 'linux'


def check_sudo():
    '''Re-run the current command under sudo unless already root (Linux only)'''
    if not is_linux() or os.geteuid() == 0:
        return

    print("⚠️  xenz-setup requires root privileges")
    print("   Restarting with sudo...")
    result = subprocess.run(['sudo', sys.executable] + sys.argv)
    sys.exit(result.returncode)


def check_command_exists(command):
    '''Check if a command is on PATH'''
    try:
        result = subprocess.run(
            ['which', command],
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='ignore'
        )
        return result.returncode == 0
    except OSError:
        return False


def detect_distro(run=run_command):
    '''Return (distro_id, codename) from lsb_release, lower-cased'''
    distro = run(['lsb_release', '-is'])
    codename = run(['lsb_release', '-cs'])
    if distro.returncode != 0 or codename.returncode != 0:
        return None, None
    return distro.stdout.strip().lower(), codename.stdout.strip()


def get_dpkg_architecture(run=run_command):
    result = run(['dpkg', '--print-architecture'])
    return result.stdout.strip() if result.returncode == 0 else 'amd64'


def docker_source_line(distro, codename, arch, keyring=DOCKER_KEYRING):
    return (
        f"deb [arch={arch} signed-by={keyring}] "
        f"https://download.docker.com/linux/{distro} {codename} stable\n"
    )


def get_system_stats():
    '''Host CPU, memory, disk and uptime figures'''
    mem = psutil.virtual_memory()
    disk = psutil.disk_usage('/')
    load = os.getloadavg() if hasattr(os, 'getloadavg') else (0.0, 0.0, 0.0)

    return {
        'hostname': platform.node(),
        'cpu_percent': psutil.cpu_percent(interval=0.5),
        'cpu_count': psutil.cpu_count(),
        'load': load,
        'ram_used': mem.used / (1024 ** 3),
        'ram_total': mem.total / (1024 ** 3),
        'ram_percent': mem.percent,
        'disk_used': disk.used / (1024 ** 3),
        'disk_total': disk.total / (1024 ** 3),
        'disk_percent': disk.percent,
        'uptime_seconds': int(time.time() - psutil.boot_time()),
    }


def format_uptime(seconds):
    days, rest = divmod(int(seconds), 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    if days:
        return f"{days}d {hours}h {minutes}m"
    return f"{hours}h {minutes}m"
