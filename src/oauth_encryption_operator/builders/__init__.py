"""Builders for resources created by the operator."""

from .mirror_secret import create_mirror_secret_from_source

__all__ = ["create_mirror_secret_from_source"]
