import subprocess

from xenz.utils.progress import run_command

PRUNE_TARGETS = ['image', 'volume', 'network', 'builder']


def get_docker_compose_command():
    """Get the correct docker compose command for the system"""

    try:
        result = subprocess.run(
            ['docker', 'compose', 'version'],
            capture_output=True,
            text=True
        )

        if result.returncode == 0:
            return ['docker', 'compose']

        # Legacy standalone binary
        result = subprocess.run(
            ['docker-compose', '--version'],
            capture_output=True,
            text=True
        )

        if result.returncode == 0:
            return ['docker-compose']
    except FileNotFoundError:
        pass

    return ['docker', 'compose']


def check_docker_status():
    """Check Docker availability and return detailed status."""
    try:
        result = subprocess.run(
            ['docker', 'info'],
            capture_output=True,
            text=True,
            timeout=10
        )
        if result.returncode == 0:
            return {'installed': True, 'running': True, 'message': 'Docker is running'}
        else:
            stderr = result.stderr.lower()
            if 'cannot connect' in stderr or 'is the docker daemon running' in stderr:
                return {'installed': True, 'running': False, 'message': 'Docker is installed but not running. Run: sudo systemctl start docker'}
            return {'installed': True, 'running': False, 'message': f'Docker error: {result.stderr.strip()[:100]}'}
    except FileNotFoundError:
        return {'installed': False, 'running': False, 'message': 'Docker is not installed. Run xenz-setup first.'}
    except subprocess.TimeoutExpired:
        return {'installed': True, 'running': False, 'message': 'Docker is not responding (timeout). Restart Docker.'}


def prune_command(target):
    if target not in PRUNE_TARGETS:
        raise ValueError(f"Unknown prune target: {target}")
    return ['docker', target, 'prune', '-f']


def cleanup(targets=None, run=run_command):
    """Prune each target independently; returns {target: CompletedProcess}"""
    results = {}
    for target in targets or PRUNE_TARGETS:
        results[target] = run(prune_command(target), f"Pruning {target}s")
    return results
