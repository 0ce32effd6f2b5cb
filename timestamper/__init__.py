"""TimeStamper: insert formatted date/time stamps into text documents."""

__version__ = "1.3.0"
