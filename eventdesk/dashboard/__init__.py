"""Dashboard financial aggregation."""
