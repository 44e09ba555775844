"""Operator keeping the OAuth API server encryption-config secret in sync."""
