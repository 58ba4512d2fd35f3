"""Stone worktop quotation pricing service."""

__version__ = "1.0.0"
