"""
Streambean API

Read-only aggregation layer over Twitch live streams and schedules.
"""
__version__ = "0.1.0"
