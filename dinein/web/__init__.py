"""Django project for Dine-in."""
