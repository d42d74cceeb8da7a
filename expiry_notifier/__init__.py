"""Django project package for the expiry notifier service."""
