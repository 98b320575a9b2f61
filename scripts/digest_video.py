"""Acquire transcripts for one or more videos and optionally generate a digest.

Usage:
    python scripts/digest_video.py https://youtu.be/dQw4w9WgXcQ --kind summary
    python scripts/digest_video.py URL1 URL2 --transcript-only --save
"""

import argparse
import asyncio
import sys
from dataclasses import asdict
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tubedigest.errors import TubeDigestError
from tubedigest.generation.generation import prepare_generation, stream_text
from tubedigest.ingestion.pipeline import process_video
from tubedigest.ingestion.storage import get_supabase_client, save_history
from tubedigest.pipeline_config import OutputKind


def digest_video(url: str, kind: OutputKind | None, save: bool) -> bool:
    """Process one URL, print the result and return True on success."""
    try:
        processed = asyncio.run(process_video(url))
    except TubeDigestError as e:
        print(f"ERROR {url}: {e}")
        return False

    print(f"# {processed.metadata.title} ({processed.metadata.author_name})")

    transcript = processed.transcript
    if transcript is None:
        print(f"No transcript: {processed.error}")
        return False

    speakers = "multiple speakers" if transcript.has_speakers else "single speaker"
    print(f"Source: {transcript.source.value}, {len(transcript.text)} chars, {speakers}\n")

    output = ""
    if kind is None:
        print(transcript.text)
    else:
        request = asyncio.run(
            prepare_generation(transcript.text, processed.metadata.title, kind)
        )
        for delta in stream_text(request):
            output += delta
            print(delta, end="", flush=True)
        print()

    if save:
        save_history(
            get_supabase_client(),
            {
                "video_id": processed.video_id,
                "url": url,
                "metadata": asdict(processed.metadata),
                "transcript": transcript.text,
                "transcript_source": transcript.source.value,
                "has_speakers": transcript.has_speakers,
                "summary": output if kind is OutputKind.SUMMARY else "",
                "key_points": output if kind is OutputKind.KEY_POINTS else "",
            },
        )
        print(f"Saved {processed.video_id} to history")

    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("urls", nargs="+")
    parser.add_argument("--kind", choices=[k.value for k in OutputKind], default="summary")
    parser.add_argument("--transcript-only", action="store_true")
    parser.add_argument("--save", action="store_true")
    args = parser.parse_args()

    kind = None if args.transcript_only else OutputKind(args.kind)
    failures = 0
    for url in args.urls:
        try:
            ok = digest_video(url, kind, args.save)
        except TubeDigestError as e:
            print(f"ERROR {url}: {e}")
            ok = False
        failures += 0 if ok else 1
        print()

    print(f"Done! {len(args.urls) - failures} succeeded, {failures} failed.")
    sys.exit(1 if failures else 0)
