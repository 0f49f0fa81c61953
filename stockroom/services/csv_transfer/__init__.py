"""CSV export and import of products and orders."""
