"""CLI command groups; importing a module registers its commands on the app."""
