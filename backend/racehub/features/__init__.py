"""Feature modules: runners (identity resolution), races (results, import), series (standings)."""
