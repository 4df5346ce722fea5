"""Core model, configuration, engine and terminal output."""
