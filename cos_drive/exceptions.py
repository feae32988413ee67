# cos_drive/exceptions.py

class DriveError(Exception):
    """Base error for the drive services. Carries the HTTP status the routes answer with."""
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

class ValidationFailure(DriveError):
    """Request rejected before touching the store (size, name, parent checks)."""
    status_code = 400

class NotFound(DriveError):
    """No FileRecord with the requested id."""
    status_code = 404

class AlreadyExists(DriveError):
    """A record already mirrors the key being created."""
    status_code = 409

class UploadFailed(DriveError):
    """COS did not acknowledge a put."""
    status_code = 400

class DeleteFailed(DriveError):
    """COS reported per-key errors for a batch delete."""
    status_code = 502

class CycleDetected(DriveError):
    """The parent chain loops or is deeper than the configured bound."""
    status_code = 500

class StoreError(DriveError):
    """Any other failure reported by the COS SDK."""
    status_code = 502

    def __init__(self, message, code=None, store_status=None):
        super().__init__(message)
        self.code = code
        self.store_status = store_status
