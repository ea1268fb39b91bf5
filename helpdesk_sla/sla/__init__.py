"""
SLA Module
==========

Bounded Context for Service Level Agreement deadlines.

Responsibilities:
- Answer business-calendar questions (working days, windows, holidays)
- Advance an instant by business hours or on a 24/7 clock
- Calculate response and resolution deadlines per ticket priority
- Render customer-facing expectation messages
- Serve the above over HTTP with hot-reloadable YAML settings
"""
