"""State layer.

Holds the single observation buffer shared by the ingestor, the submitter
and the status reporter.
"""

from signalk_windy.state.buffer import ObservationBuffer

__all__ = ["ObservationBuffer"]
