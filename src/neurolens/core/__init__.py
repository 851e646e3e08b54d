"""Core building blocks: transport, configuration, logging and pure history logic."""
