"""
Per-document processing.
"""

from .document_processor import DocumentProcessor, FRONT_MATTER_STEP, WIKILINKS_STEP

__all__ = ["DocumentProcessor", "FRONT_MATTER_STEP", "WIKILINKS_STEP"]
