"""Report aggregation over product and order snapshots."""
