"""
xchannel.demo
Demo: a producer thread emits state updates; the consumer only cares about the latest one.
"""
from __future__ import annotations

import argparse
import logging
import threading
import time
from typing import List, Optional

from .channel import UNSET, Channel
from .config import load_settings

log = logging.getLogger("xchannel")


def produce(ch: Channel, count: int, interval: float) -> None:
    for n in range(1, count + 1):
        ch.send({"id": n, "tag": f"update-{n}"})
        time.sleep(interval)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="latest-state polling over an xchannel")
    ap.add_argument("--count", type=int, default=10, help="number of updates to send")
    ap.add_argument("--interval", type=float, default=0.05, help="seconds between updates")
    ap.add_argument("--poll", type=float, default=0.12, help="seconds between consumer polls")
    ap.add_argument("--serializer", choices=["pickle", "json"])
    ap.add_argument("--framing", choices=["base64", "separator"])
    args = ap.parse_args(argv)
    if args.count < 1:
        ap.error("--count must be at least 1")

    overrides = {k: v for k, v in (("serializer", args.serializer), ("framing", args.framing)) if v}
    settings = load_settings(**overrides)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)-7s %(name)s — %(message)s")

    with Channel.from_settings(settings) as ch:
        log.info("channel open: %r", ch)
        producer = threading.Thread(target=produce, args=(ch, args.count, args.interval), daemon=True)
        producer.start()

        latest = UNSET
        while latest is UNSET or latest["id"] < args.count:
            time.sleep(args.poll)
            latest = ch.last_message()
            log.info("latest: %s", latest)

        producer.join()
    log.info("done, channel closed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
