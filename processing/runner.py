"""Process a single newspaper document from the command line."""
import argparse
import asyncio
import logging
import mimetypes
import signal
import sys
from datetime import date
from pathlib import Path

from api.models.job import JobStateEnum, ProcessingJob
from database.connection import DatabaseConnection
from database.repositories.subject_repo import SubjectRepository
from database.storage import MemoryStorage, MongoStorage
from processing.pipeline import build_pipeline
from processing.queue import ProcessingQueue
from shared.config import settings
from shared.utils import validate_iso_date

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def iso_date(value: str) -> str:
    try:
        return validate_iso_date(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarize a newspaper into subject briefs")
    parser.add_argument("file", help="Document name inside the upload directory")
    parser.add_argument("--newspaper-id", required=True)
    parser.add_argument("--name", help="Display name (defaults to the file name)")
    parser.add_argument("--date", type=iso_date, default=date.today().isoformat(), help="Edition date, YYYY-MM-DD")
    parser.add_argument("--mime-type", help="Overrides the type guessed from the file name")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    """Main entry point for one-off processing."""
    args = parse_args(argv)
    mime_type = args.mime_type or mimetypes.guess_type(args.file)[0] or "application/pdf"
    job = ProcessingJob(
        newspaper_id=args.newspaper_id,
        name=args.name or Path(args.file).name,
        date=args.date,
        file_path=args.file,
        mime_type=mime_type,
    )

    if settings.storage_backend == "memory":
        storage = MemoryStorage()
    else:
        db = await DatabaseConnection.init_mongo()
        await SubjectRepository(db).seed_defaults()
        storage = MongoStorage(db)

    queue = ProcessingQueue(build_pipeline(storage))
    queue.start()

    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Received shutdown signal")
        asyncio.create_task(queue.stop())

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, signal_handler)

    try:
        queue.enqueue(job)
        await queue.join()
    finally:
        await queue.stop()
        await DatabaseConnection.close_connections()

    status = queue.get_latest_status()
    if status is None:
        logger.error("Job never started")
        return 1

    logger.info(f"Job {status.id} {status.state.value}: {status.message}")
    return 0 if status.state == JobStateEnum.COMPLETED else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
