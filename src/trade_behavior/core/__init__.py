"""Core types shared by every analytics component."""
