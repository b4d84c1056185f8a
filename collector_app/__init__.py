"""Analytics collector web application."""
