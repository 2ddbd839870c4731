"""Adapters — bindings to the CI runner around the planner."""
