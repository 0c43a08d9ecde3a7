import asyncio
import logging
import sys

from society.config import config
from society.database.core import create_engine, create_session_factory, init_models
from society.database.seed import seed_society
from society.app import create_dispatcher


async def main():
    # Configure logging
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        stream=sys.stdout,
    )

    engine = create_engine()
    await init_models(engine)
    session_factory = create_session_factory(engine)

    if config.SEED_ON_START:
        try:
            async with session_factory() as session:
                await seed_society(session)
        except Exception as e:
            logging.error(f"Failed to seed store: {e}")
            raise

    dp = create_dispatcher(session_factory)
    logging.info(f"Registered {len(dp.endpoints)} endpoints")

    stats = await dp.services.stats.compute_stats()
    logging.info(
        f"Society ready: {stats.total_flats} flats ({stats.paid_flats} paid), "
        f"{stats.pending_complaints} open complaints, {stats.active_visitors} visitors inside"
    )

    await engine.dispose()


def run():
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.info("Stopped.")

if __name__ == "__main__":
    run()
