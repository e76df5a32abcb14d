"""Use-case layer for admin list workflows.

Each module coordinates domain objects and ports without performing transport
I/O directly, so view models stay testable with small fakes.
"""
