"""Household price trends (UI-agnostic) logic.

This package contains:
- spreadsheet loading (XLSX -> pandas) and presidency tagging
- filter criteria and filtering helpers
- inflation adjustment against a CPI table
- series building and chart helpers (Altair -> Vega-Lite spec dict)
"""
