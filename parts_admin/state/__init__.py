"""State machine modules."""

from parts_admin.state.workflow import StatusTransitions

__all__ = ["StatusTransitions"]
