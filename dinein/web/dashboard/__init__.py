"""Dashboard - summary figures for staff."""
