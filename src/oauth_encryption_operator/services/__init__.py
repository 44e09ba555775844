"""Reconciliation services."""

from .reconciler import Action, MirrorReconciler, SyncDecision, decide

__all__ = ["Action", "MirrorReconciler", "SyncDecision", "decide"]
