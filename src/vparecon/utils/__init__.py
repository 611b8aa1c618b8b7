"""Utility functions for vparecon."""

from vparecon.utils.amount_parser import parse_amount

__all__ = ["parse_amount"]
