"""Agent interaction logger for debugging and auditing."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Any, Dict, Optional


class LLMLogger:
    """Logger for agent API interactions with request/response tracking."""

    def __init__(self, log_dir: str = "logs"):
        """Initialize LLM logger.

        Args:
            log_dir: Directory to store log files
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger("llm_interactions")
        self.logger.setLevel(logging.DEBUG)

        # Prevent duplicate handlers
        if not self.logger.handlers:
            # One JSON document per line, one file per day
            log_file = self.log_dir / f"llm_interactions_{datetime.now().strftime('%Y%m%d')}.log"
            fh = logging.FileHandler(log_file, encoding='utf-8')
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(logging.Formatter('%(message)s'))
            self.logger.addHandler(fh)
            self.logger.propagate = False

    @staticmethod
    def _messages_to_dicts(messages_sent: List[Any]) -> List[Dict[str, Any]]:
        """Convert LangChain messages to plain dicts for logging."""
        return [
            {
                "type": msg.__class__.__name__,
                "role": getattr(msg, 'type', 'unknown'),
                "content": getattr(msg, 'content', ''),
            }
            for msg in messages_sent
        ]

    def log_interaction(
        self,
        session_id: str,
        agent_id: str,
        model: str,
        messages_sent: List[Any],
        response_text: str,
        tokens: Optional[int] = None,
        elapsed_seconds: Optional[float] = None,
    ) -> None:
        """Log a complete agent interaction.

        Args:
            session_id: Session identifier
            agent_id: Which agent was called ("A" or "B")
            model: Model name used
            messages_sent: List of messages sent to the LLM
            response_text: Text returned by the provider
            tokens: Reported token usage, if any
            elapsed_seconds: Wall-clock duration of the call
        """
        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "type": "INTERACTION",
            "session_id": session_id,
            "agent": agent_id,
            "model": model,
            "request": {
                "message_count": len(messages_sent),
                "messages": self._messages_to_dicts(messages_sent),
            },
            "response": {
                "content": response_text,
                "tokens": tokens,
            },
            "elapsed_seconds": elapsed_seconds,
        }
        self.logger.debug(json.dumps(log_entry, ensure_ascii=False))

    def log_error(self, session_id: str, agent_id: str, error: Exception, context: str = "") -> None:
        """Log agent interaction error.

        Args:
            session_id: Session identifier
            agent_id: Which agent was called
            error: Exception that occurred
            context: Additional context about the error
        """
        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "type": "ERROR",
            "session_id": session_id,
            "agent": agent_id,
            "error": {
                "type": error.__class__.__name__,
                "message": str(error),
                "context": context
            }
        }
        self.logger.error(json.dumps(log_entry, ensure_ascii=False))


# Global logger instance
_llm_logger = None


def get_llm_logger(log_dir: str = "logs") -> LLMLogger:
    """Get or create the global LLM logger instance.

    Args:
        log_dir: Directory used when the logger is first created

    Returns:
        LLMLogger instance
    """
    global _llm_logger
    if _llm_logger is None:
        _llm_logger = LLMLogger(log_dir)
    return _llm_logger
