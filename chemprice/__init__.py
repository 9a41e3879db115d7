"""Chemical vendor price lookup."""
