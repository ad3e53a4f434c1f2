"""record-spine CLI package (``record-spine`` console script)."""
