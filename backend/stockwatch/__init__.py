"""Application package for the stockwatch backend.

This package exposes the service, repository and model modules used by
the FastAPI application: members, stocks and member-owned stock groups.
Individual modules contain the concrete implementations and documentation.
"""
