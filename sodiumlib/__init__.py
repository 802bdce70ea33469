"""Kernel-style number conversions, string helpers and first-fit heap allocators."""

__version__ = "0.1.0"
__all__ = ["convert", "floatfmt", "strings", "kheap", "heap"]