"""LexForm legal document automation.

Scans identity documents and court papers with Tesseract OCR, extracts
labelled fields from the recognized text, and merges them into
``{{placeholder}}`` document templates for export as PDF or DOCX.
"""

__version__ = "1.0.0"
