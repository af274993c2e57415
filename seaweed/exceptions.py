"""Custom exception classes for the SeaweedFS client."""

from typing import Iterable, Optional


class SeaweedError(Exception):
    """
    Base exception class for all client errors.
    """
    pass


class MalformedIdentifier(SeaweedError):
    """
    Raised when a file identifier (fid) cannot be parsed.
    """

    def __init__(self, identifier: str, reason: str = "not a valid file id"):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Malformed file id {identifier!r}: {reason}")


class NoVolumeFound(SeaweedError):
    """
    Raised when the master has no location for a volume.
    """

    def __init__(self, volume_id: int):
        self.volume_id = volume_id
        super().__init__(f"Volume {volume_id} does not exist on seaweed or could not be found")


class NoFileFound(SeaweedError):
    """
    Raised when an object operation gets a 404 from the server.
    """

    def __init__(self, fid: str):
        self.fid = fid
        super().__init__(f"Item {fid} does not exist on seaweed or could not be found")


class DeleteFailed(SeaweedError):
    """
    Raised when a delete succeeds at the HTTP level but confirms nothing.
    """

    def __init__(self, fid: str):
        self.fid = fid
        super().__init__(f"Failed to delete item {fid} from seaweed")


class InvalidTag(SeaweedError):
    """
    Raised when tag keys lack the required namespace prefix.

    All offending keys are listed, in the order they were given.
    """

    def __init__(self, keys: Iterable[str], prefix: str = "Seaweed-"):
        self.keys = list(keys)
        super().__init__(
            f"Tags must start with {prefix} Invalid tags provided: {', '.join(self.keys)}"
        )


class TransferFailed(SeaweedError):
    """
    Raised on transport failures and unusable server responses.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class TransferTimeout(TransferFailed):
    """
    Raised when a request exceeds its timeout.
    """
    pass


class S3Error(SeaweedError):
    """
    Raised when an S3 gateway call fails.
    """
    pass
