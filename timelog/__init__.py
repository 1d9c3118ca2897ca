"""TimeLog — personal activity-time tracker."""

__version__ = "0.1.0"
