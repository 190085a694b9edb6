"""Fluent client helpers for the SharePoint REST API and CSOM taxonomy responses."""

__version__ = "0.1.0"