"""
Integrations for external services and APIs.

This package contains the GitHub REST adapters and the fellowship rank roster.
"""
