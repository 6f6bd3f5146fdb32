"""Output layer — JSON/text/markdown projections and Rich reports."""
