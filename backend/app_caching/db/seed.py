"""
User Store Seeding

Fills an empty users table with generated people on first start.
"""

import random
from typing import List, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..models import User

logger = structlog.get_logger()

FIRST_NAMES = [
    "Ada", "Alan", "Barbara", "Claude", "Donald", "Edsger", "Frances", "Grace",
    "Guido", "Hedy", "Ivan", "John", "Katherine", "Ken", "Linus", "Margaret",
    "Niklaus", "Radia", "Sophie", "Tim",
]
LAST_NAMES = [
    "Lovelace", "Turing", "Liskov", "Shannon", "Knuth", "Dijkstra", "Allen",
    "Hopper", "van Rossum", "Lamarr", "Sutherland", "McCarthy", "Johnson",
    "Thompson", "Torvalds", "Hamilton", "Wirth", "Perlman", "Wilson",
    "Berners-Lee",
]
EMAIL_DOMAINS = ["example.com", "example.org", "example.net"]


def generate_users(count: int, seed: Optional[int] = None) -> List[User]:
    """Generate user records with a full name and a matching email."""
    rng = random.Random(seed)
    users = []
    for index in range(count):
        first = rng.choice(FIRST_NAMES)
        last = rng.choice(LAST_NAMES)
        local_part = f"{first}.{last}".lower().replace(" ", "")
        users.append(
            User(
                name=f"{first} {last}",
                email=f"{local_part}{index}@{rng.choice(EMAIL_DOMAINS)}",
            )
        )
    return users


async def seed_users(
    session_factory: async_sessionmaker[AsyncSession], count: int
) -> int:
    """
    Seed the users table if it is empty.

    Args:
        session_factory: Session factory bound to the initialized engine
        count: Number of users to generate

    Returns:
        Number of users inserted (0 if the table already had data)
    """
    async with session_factory() as session:
        existing = await session.scalar(select(func.count()).select_from(User))
        if existing:
            logger.info("User store already seeded", existing=existing)
            return 0

        session.add_all(generate_users(count))
        await session.commit()

    logger.info("User store seeded", inserted=count)
    return count
