"""
Structured operation logging for the answering pipeline, retry transport and FAQ queue.
"""

import logging
from typing import Any, Dict


def _truncate(text: str, limit: int = 50) -> str:
    if text is None:
        return ""
    return text[:limit] + "..." if len(text) > limit else text


class StructuredLogger:
    """Structured logger emitting one 'Operation/Status/Details' line per event."""

    def __init__(self, name: str = "navi"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    # Pipeline stages
    def log_query_parsed(self, category: str, message: str):
        """Log the resolved scope of an inbound question."""
        self.log_operation("pipeline.parse", "success", {
            "category": category,
            "message": _truncate(message),
        })

    def log_retrieval(self, category: str, hit_count: int, top_score: float = None, duration_ms: float = None):
        """Log the outcome of a category-scoped search."""
        details = {"category": category, "hits": hit_count}
        if top_score is not None:
            details["top_score"] = round(top_score, 4)
        if duration_ms is not None:
            details["duration_ms"] = duration_ms
        self.log_operation("pipeline.retrieve", "success" if hit_count else "empty", details)

    def log_generation(self, model: str, duration_ms: float, response_length: int):
        """Log a completed generation call."""
        self.log_operation("pipeline.generate", "success", {
            "model": model,
            "duration_ms": duration_ms,
            "response_length": response_length,
        })

    def log_degraded(self, reason_code: str, error: Exception = None):
        """Log an expected runtime failure mapped to a fallback answer."""
        details = {"reason_code": reason_code}
        if error is not None:
            details["error_type"] = type(error).__name__
            details["error"] = _truncate(str(error), 100)
        self.log_operation("pipeline.degraded", reason_code, details, level=logging.WARNING)

    def log_invariant_violation(self, component: str, message: str, details: Dict[str, Any] = None):
        """Log an internal invariant violation (e.g. embedder/store dimension drift)."""
        log_details = {"component": component, "message": message}
        if details:
            log_details.update(details)
        self.log_operation("invariant.violation", "error", log_details, level=logging.ERROR)

    # Transport retry
    def log_retry_attempt(self, operation: str, attempt: int, max_attempts: int, error: Exception, delay_sec: float = None):
        """Log a failed transport attempt that will (or will not) be retried."""
        details = {
            "attempt": attempt,
            "max_attempts": max_attempts,
            "error": _truncate(str(error), 100),
        }
        if delay_sec is not None:
            details["backoff_sec"] = round(delay_sec, 3)
        status = "retrying" if attempt < max_attempts else "exhausted"
        self.log_operation(f"retry.{operation}", status, details, level=logging.WARNING)

    # FAQ moderation queue
    def log_faq_submitted(self, faq_id: int, category: str, submitted_by: str):
        """Log a new community FAQ submission."""
        self.log_operation("faq.submitted", "pending", {
            "faq_id": faq_id,
            "category": category,
            "submitted_by": submitted_by,
        })

    def log_faq_status_changed(self, faq_id: int, status: str, found: bool = True):
        """Log a moderation decision."""
        self.log_operation("faq.status", status if found else "not_found", {"faq_id": faq_id})

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()
