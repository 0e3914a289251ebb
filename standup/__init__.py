"""Daily standup collection and digest delivery.

Members submit short status reports (what they did, what they plan, what
blocks them). Once a day, at a configured local time, the latest report
per person is compiled into one digest, delivered to a destination
channel, and the collected reports are cleared.
"""

__version__ = "0.1.0"
