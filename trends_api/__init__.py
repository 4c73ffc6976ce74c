"""trends-api: admission control for the 7ftrends REST backend."""
