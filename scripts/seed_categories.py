import asyncio
import sys
from pathlib import Path

from loguru import logger

sys.path.insert(0, str(Path(__file__).parent.parent))

from vidshare.db.database import create_tables, get_async_sessionmaker
from vidshare.services.seed_service import SeedService


async def main():
    if len(sys.argv) < 2:
        logger.error("Usage: python scripts/seed_categories.py <path_to_json_file>")
        sys.exit(1)

    json_file_path = sys.argv[1]

    if not Path(json_file_path).exists():
        logger.error(f"File not found: {json_file_path}")
        sys.exit(1)

    logger.info("Starting seed process...")

    try:
        await create_tables()
        sessionmaker = get_async_sessionmaker()

        async with sessionmaker() as session:
            result = await SeedService(session).load_from_json_file(json_file_path)

            logger.success(
                f"Seeding completed successfully!\n"
                f"  Categories loaded: {result['categories']}\n"
                f"  Users loaded: {result['users']}\n"
                f"  Videos loaded: {result['videos']}"
            )

    except Exception as e:
        logger.exception(f"Error seeding data: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
