"""Extraction, validation and OCR services."""
