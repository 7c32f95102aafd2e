"""Run one pull and print the merged configuration as JSON."""

from __future__ import annotations

import json
import sys

from acm_client.client import AcmClient
from acm_client.errors import AcmError
from acm_client.logging_utils import get_logger


def main() -> int:
    try:
        logger = get_logger("acm_client")
    except RuntimeError as exc:
        sys.stderr.write(f"{exc}\n")
        return 2

    try:
        with AcmClient() as client:
            config = client.pull()
    except AcmError as exc:
        logger.error("Pull failed (%s): %s", exc.code, exc)
        return 1

    json.dump(config, sys.stdout, ensure_ascii=False, indent=2, sort_keys=True)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
