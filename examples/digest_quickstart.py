#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import time

from laakhay.digest import DigestEngine, DigestPool


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Quickstart for streamed, parallel and session digests")
    p.add_argument("size_mib", nargs="?", type=int, default=32, help="Random input size in MiB")
    p.add_argument("tasks", nargs="?", type=int, default=4, help="Parallel slice count")
    p.add_argument("--algorithm", default="md5")
    p.add_argument("--verbose", action="store_true", help="Enable diagnostic logging")
    return p.parse_args()


async def heartbeat(stop: asyncio.Event) -> int:
    """Count event loop ticks to show hashing never blocks the loop."""
    ticks = 0
    while not stop.is_set():
        ticks += 1
        await asyncio.sleep(0)
    return ticks


async def main() -> None:
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.INFO)

    data = os.urandom(args.size_mib * 1024 * 1024)
    engine = DigestEngine(args.tasks, algorithm=args.algorithm, log_enabled=args.verbose)

    stop = asyncio.Event()
    beat = asyncio.create_task(heartbeat(stop))
    started = time.perf_counter()
    streamed = await engine.compute_digest_streamed(data)
    stop.set()
    print(f"STREAMED  {streamed} ({time.perf_counter() - started:.2f}s, ticks={await beat})")

    started = time.perf_counter()
    parallel = await engine.compute_digest_parallel(data)
    print(f"PARALLEL  {parallel} ({time.perf_counter() - started:.2f}s, tasks={engine.task_count})")

    # Incremental session fed in 1 MiB pieces
    engine.start_session("quickstart")
    for offset in range(0, len(data), 1024 * 1024):
        engine.update_session("quickstart", data[offset : offset + 1024 * 1024])
    print(f"SESSION   {engine.finalize_session('quickstart')}")

    async with DigestPool(args.algorithm) as pool:
        halves = [data[: len(data) // 2], data[len(data) // 2 :]]
        digests = await pool.calculate_batch(
            halves, length=16, on_progress=lambda done, total: print(f"BATCH     {done}/{total}")
        )
        print(f"POOL      {digests}")


if __name__ == "__main__":
    asyncio.run(main())
