"""Dine-in: table ordering, hosted payments and live order tracking."""
