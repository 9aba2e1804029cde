import random
from datetime import datetime
from typing import Optional

ORDER_NUMBER_PREFIX = "OS"


def generate_order_number(
    now: Optional[datetime] = None, rng: Optional[random.Random] = None
) -> str:
    """OS + YYMMDD + three random digits, e.g. OS250314042."""
    now = now or datetime.now()
    rng = rng or random
    return f"{ORDER_NUMBER_PREFIX}{now:%y%m%d}{rng.randint(0, 999):03d}"
