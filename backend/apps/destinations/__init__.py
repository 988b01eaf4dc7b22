"""
Destinations app - fan-out of submissions to external sinks.

Each destination type (email, slack, sheets, sms, webhook) has one handler.
The dispatcher runs every enabled destination of a connector in isolation
and returns one outcome per destination type.
"""
