"""HTTP adapter for the expense store."""
