"""Typed models for configuration records, form submissions and position fixes."""

from lunasync.models.location import LocationOptions, Position, round_coordinate
from lunasync.models.record import ConfigSubmission, ConfigurationRecord, OutboundMessage

__all__ = [
    "ConfigSubmission",
    "ConfigurationRecord",
    "LocationOptions",
    "OutboundMessage",
    "Position",
    "round_coordinate",
]
