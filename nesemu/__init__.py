"""A 6502/NES CPU emulator with memory buses, an iNES loader and a text-mode debugger."""

__version__ = "0.1.0"