"""Framework layer: settings, logging, startup checks."""
