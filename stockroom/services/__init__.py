"""Business services for catalog, orders, reports and CSV transfer."""
