from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

from markupfix.agent.conversion import SYSTEM_PROMPT, ConversionConfig, convert_markup
from markupfix.agent.errors import ExhaustedRetries, LLMRequestError
from markupfix.agent.history import History
from markupfix.agent.llm_client import LLMConfig, create_llm_client
from markupfix.agent.regenerate import LLMCandidateGenerator, generate_and_validate
from markupfix.config_manager import load_api_keys, load_model_config
from markupfix.logging_utils import setup_logging
from markupfix.paths import DEFAULT_API_CONFIG, DEFAULT_MODEL_CONFIG, LOGS_DIR

logger = logging.getLogger(__name__)


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--output", type=Path, default=None, help="Write the normalized JSON here instead of stdout")
    parser.add_argument("--max-attempts", type=int, default=3, help="Parse attempts before giving up")
    parser.add_argument("--log-file", type=Path, default=None, help=f"Optional DEBUG log file (e.g. {LOGS_DIR / 'markupfix.log'})")
    parser.add_argument("--verbose", action="store_true", help="Log INFO messages to the console")
    parser.add_argument("--config", type=Path, default=DEFAULT_API_CONFIG, help="API config JSON (for env key injection)")
    parser.add_argument("--model-config", type=Path, default=DEFAULT_MODEL_CONFIG, help="Model config YAML (openai: api_key/base_url/model)")
    parser.add_argument("--model", type=str, default=None, help="LLM model name (OPENAI_MODEL if unset)")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="markupfix: repair and normalize LLM-generated markup trees")
    sub = parser.add_subparsers(dest="command", required=True)

    normalize = sub.add_parser("normalize", help="Validate and normalize a candidate {\"elements\": [...]} file")
    normalize.add_argument("candidate", type=Path, help="Candidate JSON file (may be fenced in ```json)")
    normalize.add_argument("--offline", action="store_true", help="Single attempt, never call the LLM")
    _add_common_args(normalize)

    convert = sub.add_parser("convert", help="Convert a JSP/HTML snippet with the configured LLM")
    convert.add_argument("markup", type=Path, help="Markup file to convert")
    _add_common_args(convert)
    return parser.parse_args(argv)


def _generator(args: argparse.Namespace) -> LLMCandidateGenerator:
    load_api_keys(args.config, set_env=True)
    load_model_config(args.model_config)
    return LLMCandidateGenerator(create_llm_client(LLMConfig(model=args.model)))


def _write(text: str, output: Optional[Path]) -> None:
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    logger.info("Wrote %s", output)


async def _run(args: argparse.Namespace) -> str:
    if args.command == "normalize":
        content = args.candidate.read_text(encoding="utf-8")
        generator = None if args.offline else _generator(args)
        max_attempts = 1 if args.offline else args.max_attempts
        outcome = await generate_and_validate(content, History.start(SYSTEM_PROMPT), generator, max_attempts=max_attempts)
        return outcome.text
    markup = args.markup.read_text(encoding="utf-8")
    result = await convert_markup(markup, _generator(args), ConversionConfig(max_attempts=args.max_attempts))
    for tool_result in result.tool_results:
        logger.info("  tool %s (%s): %s", tool_result.tool_name, tool_result.tool_call_id, "ok" if tool_result.ok else tool_result.error)
    return result.reply


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(console_level=logging.INFO if args.verbose else logging.WARNING, file_path=args.log_file)
    try:
        text = asyncio.run(_run(args))
    except ExhaustedRetries as exc:
        logger.error("No valid candidate after %d attempt(s): %s", exc.attempts, exc.last_error)
        return 2
    except LLMRequestError as exc:
        logger.error("LLM request failed: %s", exc)
        return 3
    _write(text, args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
