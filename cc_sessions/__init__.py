"""cc-sessions: list, search and resume Claude Code sessions across machines."""
