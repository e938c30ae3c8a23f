import logging
import time
from typing import Any, Callable

from sqlalchemy.orm import Session

from registrar.config.settings import settings
from registrar.database import SessionLocal

logger = logging.getLogger(__name__)


def run_side_effect(description: str, func: Callable[..., Any], *args, **kwargs) -> bool:
    """
    Run a best-effort write (audit log, notification) in its own session.

    Scheduled as a background task once the primary transaction has
    committed. Each attempt gets a fresh session; failures are retried up to
    SIDE_EFFECT_MAX_ATTEMPTS and then logged. The primary mutation is never
    affected, so this returns False instead of raising.
    """
    attempts = max(1, settings.SIDE_EFFECT_MAX_ATTEMPTS)
    for attempt in range(1, attempts + 1):
        db: Session = SessionLocal()
        try:
            func(db, *args, **kwargs)
            db.commit()
            return True
        except Exception as e:
            db.rollback()
            logger.warning(f"Side effect '{description}' failed (attempt {attempt}/{attempts}): {e}")
            if attempt < attempts and settings.SIDE_EFFECT_RETRY_DELAY_SECONDS > 0:
                time.sleep(settings.SIDE_EFFECT_RETRY_DELAY_SECONDS)
        finally:
            db.close()

    logger.error(f"Giving up on side effect '{description}' after {attempts} attempts")
    return False
