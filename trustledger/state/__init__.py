"""
Off-ledger graph state and witness building.
"""
from .graph_state import EdgeRequest, GraphState

__all__ = [
    "EdgeRequest",
    "GraphState",
]
