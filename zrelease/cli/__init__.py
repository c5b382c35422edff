"""Command line entry points (`zrelease`, `zrelease-notes`)."""
