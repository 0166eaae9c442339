"""Plans module - billing plans, their limits, and the admin plan catalogue."""
