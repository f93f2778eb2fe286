"""HTTP interface for the planner."""
