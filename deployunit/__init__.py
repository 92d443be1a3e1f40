"""terraunit core: deployment units and their per-provider translators."""
