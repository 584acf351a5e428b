"""Contract checks applied to bookstore API responses."""
