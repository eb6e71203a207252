"""
Data Ingestion Module

Handles reading and validating catalog exports:
- CSV exports of streaming catalog titles (show_id, type, title, ...)
- Normalization to canonical catalog rows
"""

__version__ = "0.1.0"
