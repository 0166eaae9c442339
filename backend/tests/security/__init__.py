"""Security tests for TokenLens

This module contains security-focused tests including:
- Authentication bypass attempts
- Tenant escape/isolation attacks
"""
