"""Entity change auditing for the membership application.

Captures who changed what on every persisted write, classifies and redacts
the diff, and renders the resulting audit stream as a readable timeline.
"""
