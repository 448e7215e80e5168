class SteamFixerError(Exception):
    """Base class for errors surfaced to the caller."""

class ReadError(SteamFixerError):
    pass

class InvalidManifest(SteamFixerError):
    pass

class NotFound(SteamFixerError):
    pass

class RenameError(SteamFixerError):
    pass

class CacheDirError(SteamFixerError):
    """The shared icon cache could not be created."""

class SteamNotFound(NotFound):
    pass

class LaunchError(SteamFixerError):
    pass

class InvalidPath(SteamFixerError):
    """A folder name that would leave the library's common directory."""
