"""
Transformations between a form tree and its external representations.
"""

from formtree.transform.payload import PayloadProjector
from formtree.transform.reconcile import ResponseReconciler

__all__ = ["PayloadProjector", "ResponseReconciler"]
