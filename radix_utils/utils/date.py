from datetime import datetime, timedelta
from typing import Optional

MINUTES_PER_EPOCH = 5


def calculate_estimated_unlock_date(epoch_unlocked: int, current_epoch: int,
                                    now: Optional[datetime] = None) -> str:
    """
    Estimate the wall-clock time an epoch is reached, assuming 5 minute epochs.

    Args:
        epoch_unlocked: Target epoch
        current_epoch: Current ledger epoch
        now: Reference time (defaults to the local current time)

    Returns:
        str: Date formatted as 'DD/MM/YYYY, h:mm am|pm'
    """
    now = now or datetime.now()
    unlock_date = now + timedelta(minutes=(epoch_unlocked - current_epoch) * MINUTES_PER_EPOCH)
    hour = unlock_date.hour % 12 or 12
    meridiem = 'am' if unlock_date.hour < 12 else 'pm'
    return f"{unlock_date:%d/%m/%Y}, {hour}:{unlock_date:%M} {meridiem}"
