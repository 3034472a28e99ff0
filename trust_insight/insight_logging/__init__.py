"""
Structured logging for the trust insight engine.

JSON logs with timestamp, event_type and address fields.
Use get_logger() in all engine modules for aggregation-friendly output.
"""

from trust_insight.insight_logging.logger import bind_user, get_logger, log_stream, short_id

__all__ = ["bind_user", "get_logger", "log_stream", "short_id"]
