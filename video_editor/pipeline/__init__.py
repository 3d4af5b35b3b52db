"""Request dispatching and execution for host calls."""
