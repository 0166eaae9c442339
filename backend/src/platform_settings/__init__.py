"""Platform settings module - the SUPER_ADMIN managed system settings row.

Holds the platform's default explorer credentials, which token analytics fall
back to when a token has no key of its own.
"""
