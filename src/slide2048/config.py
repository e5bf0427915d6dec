import argparse
import dataclasses
import time
from pathlib import Path
from typing import Sequence

DEFAULT_DELAY_MS = 250


@dataclasses.dataclass
class SessionConfig:
    seed: int
    delay_ms: int = DEFAULT_DELAY_MS
    record_path: Path | None = None
    playback_path: Path | None = None
    log_file: Path | None = None

    @property
    def batch_mode(self) -> bool:
        """Recording a playback runs headless and without delay"""
        return self.record_path is not None and self.playback_path is not None

    @classmethod
    def parser(cls) -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(
            prog="slide2048",
            description="2048: A sliding tile puzzle game",
        )
        p.add_argument("-r", "--record", type=Path, default=None, help="record to file")
        p.add_argument(
            "-p", "--playback", type=Path, default=None, help="play back from file"
        )
        p.add_argument("-s", "--seed", type=int, default=None)
        p.add_argument(
            "-d",
            "--delay",
            type=int,
            default=DEFAULT_DELAY_MS,
            help="delay in ms when playing back",
        )
        p.add_argument("--log-file", type=Path, default=None)
        return p

    @classmethod
    def from_args(cls, argv: Sequence[str] | None = None) -> "SessionConfig":
        p = cls.parser()
        ns = p.parse_args(argv)

        if ns.delay < 0:
            p.error(f"delay must not be negative: {ns.delay}")

        seed = ns.seed
        if seed is None:
            seed = int(time.time())

        return cls(
            seed=seed,
            delay_ms=ns.delay,
            record_path=ns.record,
            playback_path=ns.playback,
            log_file=ns.log_file,
        )
