"""
alarm_light - offline voice control for a single relay-driven alarm light.
"""

__version__ = "0.1.0"
