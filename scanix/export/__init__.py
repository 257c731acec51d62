"""Export collaborators - PDF documents and the photo library."""

from .pdf import PdfExporter
from .photos import PhotoLibrary

__all__ = ["PdfExporter", "PhotoLibrary"]
