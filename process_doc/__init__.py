"""
Process Document Exporter

Turns a generated process description (title, markdown-like body and
screenshots) into a paginated A4 PDF or a flat text file.
"""

__version__ = "1.0.0"
