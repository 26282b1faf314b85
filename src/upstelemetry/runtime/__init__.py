"""Runtime orchestration and the command-line entry point."""
