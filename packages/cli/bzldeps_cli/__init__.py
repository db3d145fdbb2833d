"""bzldeps command line interface."""
