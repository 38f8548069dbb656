"""Huddle backend: community chat schema, provisioning and user intake API."""

__version__ = "0.1.0"
