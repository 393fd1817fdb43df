"""Restaurant app - menu catalog and the order lifecycle."""
