"""
Core configuration, logging and shared infrastructure.
"""
