"""
Utilities Package for Honeypot Sensor

Logging setup and small time helpers.
"""
