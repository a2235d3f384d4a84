"""
Alert Runner for BreathSafe Alerts API
Run one alert pass immediately, or start the daily scheduler and block
"""

import sys
import os
import asyncio
import logging

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config.settings import settings
from models.pipeline import AlertPipeline
from models.scheduler import AlertScheduler


async def run_once() -> int:
    pipeline = AlertPipeline()
    await pipeline.startup()
    try:
        summary = await pipeline.dispatcher.process_alerts()
    finally:
        await pipeline.shutdown()

    print("\n" + "=" * 70)
    print("ALERT RUN SUMMARY")
    print("=" * 70)
    print(f"Users processed:  {summary.users_processed}")
    print(f"Users failed:     {summary.users_failed}")
    print(f"Alerts sent:      {summary.total_alerts_sent}")
    for result in summary.results:
        status = f"error: {result.error}" if result.error else f"{result.alerts_sent} sent"
        print(f"  {result.user_id}: {status}")
    print("=" * 70 + "\n")
    return 0 if summary.users_failed == 0 else 1


async def run_forever():
    pipeline = AlertPipeline()
    await pipeline.startup()
    scheduler = AlertScheduler(pipeline.dispatcher)
    scheduler.start()
    print(f"Scheduler started, next run at {scheduler.next_run_time()}. Press Ctrl+C to stop.")
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.shutdown()
        await pipeline.shutdown()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description='Send BreathSafe AQI alerts to all registered users'
    )
    parser.add_argument(
        '--once',
        action='store_true',
        help='Run a single alert pass now and exit (default: start the daily scheduler)'
    )
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)

    if args.once:
        sys.exit(asyncio.run(run_once()))

    try:
        asyncio.run(run_forever())
    except KeyboardInterrupt:
        print("\nStopped.")
