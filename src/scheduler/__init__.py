"""Background scheduling of fetch cycles.

This module runs the fetch cycle once at startup and then on a fixed
interval until stopped.
"""
