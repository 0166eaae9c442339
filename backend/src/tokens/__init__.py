"""Tokens module - tracked ERC20 contracts and their per-token settings.

All endpoints are tenant-scoped: a token is only visible to the
organization that owns it.
"""
