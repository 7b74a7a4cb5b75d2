"""EventDesk backend package."""
