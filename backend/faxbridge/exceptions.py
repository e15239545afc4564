"""
Custom exceptions for the fax intake pipeline.
"""


class FaxBridgeError(Exception):
    """Base exception for all pipeline errors"""
    pass


class ConfigError(FaxBridgeError):
    """Raised when pipeline configuration is missing or invalid"""
    pass


class ScanError(FaxBridgeError):
    """Raised when the incoming directory cannot be listed (fatal for a run)"""
    pass


class ExtractionError(FaxBridgeError):
    """Raised when a source document cannot be read or yields no text"""
    pass


class RelocationError(FaxBridgeError):
    """Raised when a file cannot be moved into its terminal directory"""
    pass


class UploadError(FaxBridgeError):
    """Raised when a batch could not be delivered to the ingestion endpoint"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
