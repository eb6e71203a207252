"""
Test Suite for the Catalog Analytics Workbench

Includes:
- Shared CSV fixtures for pipeline and CLI tests
"""
