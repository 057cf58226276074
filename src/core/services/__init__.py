"""Installation steps, one module per concern."""
