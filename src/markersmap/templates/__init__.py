"""Templates patched with generated markers maps."""
