"""Shared-expense reconciliation."""

from .reconciler import SharedExpenseReconciler, reconcile

__all__ = ["SharedExpenseReconciler", "reconcile"]
