"""Terminal colors and prompts for the command line driver."""
