"""Small runner to build the analysis prompt for a transcript file and optionally call the model.

Usage examples:
  python -m meetingintel.run_analysis --transcript data/reunion.txt --section ice
  python -m meetingintel.run_analysis --transcript data/reunion.txt --participants "Ana,Luis" --call-model
"""
import argparse
import json
import sys

import requests

from meetingintel.config import get_openai_api_key
from meetingintel.errors import InsightsError
from meetingintel.insights import InsightsDispatcher
from meetingintel.logging_config import setup_logging
from meetingintel.prompt_builder import format_fecha_cl, max_tokens_for, select_prompt
from meetingintel.prompts import SECTIONS


def build_payload(args, transcript):
    meeting_info = {
        "title": args.title,
        "type": args.type,
        "duration": args.duration,
        "participants": [p.strip() for p in args.participants.split(",") if p.strip()]
        if args.participants
        else None,
    }
    return {
        "raw_transcript": transcript,
        "meeting_info": meeting_info,
        "audio_url": args.audio_url,
        "analysis_section": args.section,
    }


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument("--transcript", required=True, help="Path to a plain-text transcript file")
    parser.add_argument("--section", default=None, choices=SECTIONS, help="Analyze one section instead of the full report")
    parser.add_argument("--title", default=None)
    parser.add_argument("--type", default=None, help="Meeting type, e.g. prospecto or cliente")
    parser.add_argument("--duration", default=None)
    parser.add_argument("--participants", default=None, help="Comma separated participant names")
    parser.add_argument("--audio-url", default=None)
    parser.add_argument("--call-model", action="store_true", help="Call the provider (requires OPENAI_API_KEY)")
    args = parser.parse_args(argv)

    with open(args.transcript, "r", encoding="utf-8", errors="replace") as f:
        transcript = f.read()

    dispatcher = InsightsDispatcher()
    try:
        req = dispatcher.parse_request(build_payload(args, transcript))
    except InsightsError as exc:
        print(f"Invalid input: {exc.public_message}")
        return 2

    meeting = req.meeting_info.with_defaults()
    prompt = select_prompt(
        req.analysis_section,
        req.raw_transcript,
        meeting,
        fecha=format_fecha_cl(),
        audio_url=req.audio_url,
    )

    print(f"--- Section: {prompt.section} | max_tokens: {max_tokens_for(req.raw_transcript)} ---")
    print("\n--- User prompt preview (first 500 chars) ---")
    print(prompt.user_prompt[:500] + "..." if len(prompt.user_prompt) > 500 else prompt.user_prompt)

    if not args.call_model:
        print("\n[Info] Run with --call-model to execute the model inference.")
        return 0

    api_key = get_openai_api_key()
    if not api_key:
        print("OPENAI_API_KEY is not set.")
        return 2

    try:
        result = dispatcher.analyze(req, api_key)
    except InsightsError as exc:
        print(f"Analysis failed: {exc.detail}")
        return 1
    except requests.RequestException as exc:
        print(f"Analysis failed: could not reach the provider ({exc})")
        return 1

    print("\n--- Model Output ---")
    print(result["markdown"])
    print("\n--- Envelope ---")
    print(json.dumps({k: v for k, v in result.items() if k not in ("markdown", "insights")}, ensure_ascii=False, indent=2))
    return 0


def cli():
    """Console-script entry point."""
    setup_logging()
    sys.exit(main())


if __name__ == "__main__":
    cli()
