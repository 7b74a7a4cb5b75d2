"""Session token handling and current-owner dependencies."""
