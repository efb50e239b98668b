"""
Financial Echo Collector - Personal Money Reflection Journal

A self-hosted Python system for recording how past financial
decisions echo into present-day triggers, linking them into chains,
and reviewing the patterns they form.

This system exists to notice patterns, not to give financial advice.
"""

__version__ = "0.1.0"
