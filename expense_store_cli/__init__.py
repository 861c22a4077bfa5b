"""Console adapter for the expense store."""
