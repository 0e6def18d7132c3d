from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

import aiohttp

from truthscore.config.logging import setup_logging
from truthscore.config.settings import Settings, load_settings
from truthscore.errors import ConfigurationError, VerificationError
from truthscore.models.types import VerificationInput
from truthscore.pipeline import build_pipeline
from truthscore.processors.gemini import GeminiClient

logger = logging.getLogger(__name__)


async def run_verifications(
    settings: Settings, inputs: list[VerificationInput]
) -> list[dict[str, Any]]:
    """Verify every input concurrently; each request is independent."""
    async with aiohttp.ClientSession() as session:
        pipeline = build_pipeline(settings, session)
        results = await asyncio.gather(
            *(pipeline.verify_content(item) for item in inputs),
            return_exceptions=True,
        )

    output: list[dict[str, Any]] = []
    for item, result in zip(inputs, results):
        if isinstance(result, VerificationError):
            output.append({"kind": item.kind, "error": str(result)})
        elif isinstance(result, BaseException):
            raise result
        else:
            output.append(result.to_dict())
    return output


async def check_keys(settings: Settings) -> tuple[bool, str]:
    async with aiohttp.ClientSession() as session:
        return await GeminiClient(settings, session).check_api_key()


def _collect_inputs(args: argparse.Namespace) -> list[VerificationInput]:
    inputs: list[VerificationInput] = []
    if args.text:
        inputs.append(VerificationInput(kind="text", content=args.text))
    if args.link:
        inputs.append(VerificationInput(kind="link", content=args.link))
    if args.video:
        inputs.append(VerificationInput(kind="video", content=args.video))
    return inputs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "truthscore", description="Score content against independent news coverage"
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_verify = sub.add_parser(
        "verify", parents=[common], help="Verify text, a link and/or a video reference"
    )
    p_verify.add_argument("--text", help="Free text to verify")
    p_verify.add_argument("--link", help="URL of an article or video page")
    p_verify.add_argument("--video", help="Video file name or reference")

    sub.add_parser("check-keys", parents=[common], help="Check that the Gemini API key works")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        # check-keys reports a missing Gemini key itself
        settings = load_settings(require_keys=args.cmd != "check-keys")
    except ConfigurationError as exc:
        setup_logging(logging.DEBUG if args.debug else logging.INFO, log_file=None)
        logger.error("%s", exc)
        return 2

    setup_logging(logging.DEBUG if args.debug else logging.INFO, settings.log_file)

    if args.cmd == "check-keys":
        ok, message = asyncio.run(check_keys(settings))
        print(json.dumps({"success": ok, "message": message}, indent=2))
        return 0 if ok else 1

    inputs = _collect_inputs(args)
    if not inputs:
        parser.error("verify needs at least one of --text, --link or --video")

    results = asyncio.run(run_verifications(settings, inputs))
    print(json.dumps(results, indent=2, ensure_ascii=False))
    return 1 if any("error" in result for result in results) else 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
