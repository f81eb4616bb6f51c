"""Unified CIS / ISO 27001 / NIS2 relationship table built from mapping spreadsheets."""
