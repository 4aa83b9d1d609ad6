# XENZ v1.0 - Error taxonomy shared by the lifecycle manager and menus


class XenzError(Exception):
    """Base class for all XENZ failures"""


class ValidationError(XenzError):
    """Malformed input, rejected before any external call"""


class InvalidNameError(ValidationError):
    pass


class StateError(XenzError):
    """Pointer, directory or backup set not in the required state"""


class NoProjectError(StateError):
    def __init__(self, message="No installed project found"):
        super().__init__(message)


class ProjectDirMissingError(StateError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Project directory not found: {path}")


class ProjectExistsError(StateError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Project directory already exists: {path}")


class NoBackupsError(StateError):
    def __init__(self, message="No backups found"):
        super().__init__(message)


class InvalidSelectionError(StateError):
    pass


class ExternalToolError(XenzError):
    """A delegated command exited non-zero.

    Keeps the command, its exit code and whatever it printed so the menu
    can surface the tool's own output.
    """

    def __init__(self, message, command=None, returncode=None, output=''):
        self.command = command
        self.returncode = returncode
        self.output = output or ''
        super().__init__(message)


class CloneFailedError(ExternalToolError):
    pass


class PullFailedError(ExternalToolError):
    pass


class BuildFailedError(ExternalToolError):
    pass


class ArchiveFailedError(ExternalToolError):
    pass


class ExtractFailedError(ExternalToolError):
    pass


class UserCancelled(XenzError):
    """Operator declined at a confirmation prompt. Not an error."""

    def __init__(self, message="Cancelled"):
        super().__init__(message)
