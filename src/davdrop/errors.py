"""Errors raised by the upload pipeline."""


class DavDropError(Exception):
    """Base class for all pipeline errors."""

    pass


class InvalidRoot(DavDropError):
    """Root directory is missing or not a directory."""

    pass


class MissingFile(DavDropError):
    """A candidate file does not exist."""

    pass


class PathEscapesRoot(DavDropError):
    """A candidate file resolves outside the root directory."""

    pass


class InvalidArtifactName(DavDropError):
    """Artifact name is empty or contains characters the server rejects."""

    pass


class IncompatibleMode(DavDropError):
    """Uncompressed upload requested for more than one file."""

    pass


class ArchiveFailed(DavDropError):
    """Staging or compressing the artifact failed."""

    pass


class TransferFailed(DavDropError):
    """A request to the remote service failed."""

    pass


class ShareParseFailed(DavDropError):
    """Share response did not contain a URL."""

    def __init__(self, message: str, body: str):
        super().__init__(f"{message}. Response body: {body!r}")
        self.body = body


class NoFilesFound(DavDropError):
    """No files matched the provided search paths."""

    pass
