"""Application logging and the anomaly log."""
