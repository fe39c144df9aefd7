"""A Core War virtual machine: loads compiled champions and runs them in a shared arena."""

__version__ = "0.1.0"
__all__ = ["champion", "cli", "flags", "instructions", "loader", "memory", "op", "vm"]