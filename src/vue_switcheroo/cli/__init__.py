"""
Command Line Interface for vue-switcheroo.
"""
