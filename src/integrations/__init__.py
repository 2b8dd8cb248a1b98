"""
Integrations for external services.

Currently only GitHub: reading catalog documents through the contents API
and posting change requests as issues or repository dispatches.
"""
