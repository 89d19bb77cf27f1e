"""A set of utility functions and constants shared by all algorithms."""
