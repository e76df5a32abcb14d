"""Adapter package for external I/O implementations.

Purpose:
    Concrete implementations of the domain ports: the travel API REST client,
    its offline mock, and local JSON storage.

Call context:
    Imported by ``tripdesk.web_ui.runtime`` for wiring and by tests.
"""
