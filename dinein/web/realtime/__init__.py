"""Realtime - change notifications for orders and menu items."""
