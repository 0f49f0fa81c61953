"""Order lifecycle: persistence, reconciliation and history."""
