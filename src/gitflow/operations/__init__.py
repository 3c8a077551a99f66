"""Read-side and algorithmic operations over repository snapshots."""
