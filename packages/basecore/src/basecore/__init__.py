"""
Basecore - shared runtime plumbing.

Settings, logging and database session helpers used by every package and
app in this repository. Nothing here knows about catalog or pricing rules.
"""
