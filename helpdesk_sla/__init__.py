"""
Helpdesk SLA
============

SLA deadline calculation for helpdesk tickets.
"""

__version__ = "1.0.0"
