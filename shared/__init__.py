"""
Shared Kernel

Framework-free building blocks shared by the scheduling apps: value
objects for time ranges and the interval arithmetic every overlap check
in the platform is built on.
"""
