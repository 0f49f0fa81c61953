"""Product, category and supplier catalog."""
