"""Pure metric computations over GitHub API payloads."""
