"""Writing rendered documents to disk."""

from svdhtml.output.writer import write_documents

__all__ = ["write_documents"]
