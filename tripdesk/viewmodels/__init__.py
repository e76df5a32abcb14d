"""ViewModel package for UI state and command surfaces.

Call context:
    ``tripdesk.web_ui`` imports these view models and binds NiceGUI widget
    callbacks to their intents.

Dependencies:
    Domain types and formatting helpers only. HTTP and persistence stay in
    adapters and use cases.
"""
