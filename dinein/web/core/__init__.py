"""Core app - staff identity and shared building blocks."""
