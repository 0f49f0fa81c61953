"""Domain records, enums and store contracts."""
