# core/errors.py

class ButterflyError(Exception):
    """Base class for every error raised by the scraper."""

class StructuralError(ButterflyError):
    """The markup of a page does not have the shape the parser expects."""

class TransportError(ButterflyError):
    """An HTTP request failed or returned something other than 200."""

class FileNameUnknownError(ButterflyError):
    """No file name could be derived from a download URL."""

class AssetWriteError(ButterflyError):
    """A downloaded file could not be written to disk."""

class ColorAnalysisError(ButterflyError):
    """The Cloud Vision request failed or its response could not be read."""

class ReferenceDataError(ButterflyError):
    """The CSV reference file is missing or malformed."""

class SnapshotError(ButterflyError):
    """A snapshot could not be written, or read back."""
