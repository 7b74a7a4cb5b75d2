"""Receivable and payable status transitions."""
