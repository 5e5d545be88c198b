"""CI provider adapters (GitLab CI environment variables)."""
