"""
CLI entrypoint. Use from project root:
  python -m content_revival "https://youtube.com/watch?v=..." [--json report.json]
  python -m content_revival "https://youtu.be/..." --visualize 0 [--async]
"""

import argparse
import asyncio
import base64
import json
import mimetypes
import os
import sys
from datetime import datetime
from typing import Any, List, Optional, TextIO

from content_revival import config
from content_revival.adapters import default_adapters
from content_revival.application.pipeline import RevivalPipeline
from content_revival.domain.errors import AnalysisCancelled, is_permission_error
from content_revival.domain.models import RevivalStrategy
from content_revival.domain.report import (
    affected_segments,
    display_metadata,
    display_plan,
    engagement_score,
    outdated_items_of,
    timestamp_link,
    update_scope,
    view_comparison,
)


class ThinkingConsole:
    """
    Terminal view of the live reasoning chain. Every update carries the full
    narrative: extensions print only the new tail, anything else is reprinted.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream or sys.stdout
        self._shown = ""
        self._started = False

    def update(self, text: str) -> None:
        if text == self._shown:
            return
        if not self._started:
            self._stream.write("\n>_ Initiating Chain of Thought Analysis...\n\n")
            self._started = True
        if text.startswith(self._shown):
            self._stream.write(text[len(self._shown):])
        else:
            self._stream.write("\n" + "-" * 60 + "\n" + text)
        self._stream.flush()
        self._shown = text

    def close(self) -> None:
        if self._started:
            self._stream.write("\n")
            self._stream.flush()


def _num(value: Any) -> str:
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        return str(value)


def render_report(strategy: RevivalStrategy, youtube_url: str) -> str:
    """Plain-text rendering of the revival report."""
    meta = display_metadata(strategy)
    scope = update_scope(strategy)
    plan = display_plan(strategy)
    items = outdated_items_of(strategy)

    lines: List[str] = [
        "",
        "=" * 60,
        meta["title"],
        f"Published: {meta['publishDate']} • Current Views: {_num(meta['currentViews'])}",
        "=" * 60,
        "",
        "📊 Predictive Performance",
    ]
    for entry in view_comparison(strategy):
        lines.append(f"  {entry['label']}: {_num(entry['value'])}")
    lines.append(f"  Engagement Score: {engagement_score(strategy)}/100")

    lines += [
        "",
        "🧩 Update Scope",
        f"  Outdated Tools: {scope['outdated_tools']}",
        f"  Segments Impacted: {scope['segments_impacted']} / {scope['segment_total']}",
        "",
        "🗺️  Legacy vs Modern Map",
    ]
    if not items:
        lines.append("  No outdated items detected.")
    for idx, item in enumerate(items):
        lines.append(
            f"  [{idx}] {item.get('subject', '')}: {item.get('oldTool', '')} → "
            f"{item.get('newTool', '')} (impact {item.get('impactScore', '?')}/10)"
        )
        if item.get("reason"):
            lines.append(f"      {item['reason']}")
        for _, segment in affected_segments(strategy, item):
            start = segment.get("startTime", "")
            lines.append(f"      ▶ {start} {timestamp_link(youtube_url, start)}")

    lines += [
        "",
        "📝 Production Plan",
        f"  New Title: {plan['title']}",
        f"  Description: {plan['description']}",
        "",
        plan["scriptOutline"],
        "",
    ]
    return "\n".join(lines)


def save_data_url(data_url: str, directory: str, stem: str) -> str:
    """Decode a base64 data URL into a file; returns its path."""
    header, _, payload = data_url.partition(",")
    mime_type = header[len("data:"):].split(";")[0]
    extension = mimetypes.guess_extension(mime_type) or ".png"
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"{stem}{extension}")
    with open(path, "wb") as f:
        f.write(base64.b64decode(payload))
    return path


def _report_failure(error: BaseException, title: str) -> int:
    print(f"\n❌ {title}: {error}")
    if is_permission_error(error):
        print("💡 The API key was rejected. Set a valid GEMINI_API_KEY and run again.")
    return 1


def _run_analysis(pipeline: RevivalPipeline, url: str, use_async: bool) -> RevivalStrategy:
    console = ThinkingConsole()
    try:
        if use_async:
            return asyncio.run(pipeline.aanalyze(url, console.update))
        return pipeline.analyze(url, console.update)
    finally:
        console.close()


def _analyze_with_key_retry(pipeline: RevivalPipeline, url: str, use_async: bool) -> RevivalStrategy:
    """Run the analysis; a rejected key gets one retry with a freshly selected key."""
    try:
        return _run_analysis(pipeline, url, use_async)
    except Exception as e:
        if not (is_permission_error(e) and pipeline.can_select_key()):
            raise
        print(f"\n💡 The API key was rejected ({e}). Select a valid API key to retry.")
        if not pipeline.select_key():
            raise
    return _run_analysis(pipeline, url, use_async)


def _visualize(pipeline: RevivalPipeline, strategy: RevivalStrategy, index: int) -> int:
    items = outdated_items_of(strategy)
    if not 0 <= index < len(items):
        print(f"\n⚠️  No outdated item #{index} (report has {len(items)})")
        return 2
    try:
        data_url = pipeline.generate_overlay(items[index])
    except Exception as e:
        if is_permission_error(e):
            return _report_failure(e, "Overlay generation failed")
        print(f"\n⚠️  Failed to generate overlay ({e}). Please try again.")
        return 2
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = save_data_url(data_url, config.OUTPUT_DIR, f"overlay_{index}_{timestamp}")
    print(f"✅ Overlay saved to: {path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Analyze an old YouTube video and build a content revival plan"
    )
    parser.add_argument("url", help="YouTube video link")
    parser.add_argument("--json", metavar="PATH", help="Write the report as JSON")
    parser.add_argument(
        "--visualize",
        metavar="N",
        type=int,
        help="Generate an image overlay for outdated item N",
    )
    parser.add_argument(
        "--async",
        dest="use_async",
        action="store_true",
        help="Consume the model stream with asyncio",
    )
    args = parser.parse_args(argv)

    pipeline = RevivalPipeline(**default_adapters())

    if pipeline.needs_key():
        print("🔑 Research and image generation need a Gemini API key from a paid Google Cloud project.")
        print("   Billing: https://ai.google.dev/gemini-api/docs/billing")
        if not pipeline.select_key():
            return 1

    try:
        strategy = _analyze_with_key_retry(pipeline, args.url, args.use_async)
    except (KeyboardInterrupt, AnalysisCancelled):
        print("\n⚠️  Analysis cancelled")
        return 130
    except Exception as e:
        return _report_failure(e, "Analysis Failed")

    print(render_report(strategy, args.url))

    if args.json:
        with open(args.json, "w", encoding="utf-8") as f:
            json.dump(strategy, f, indent=2, ensure_ascii=False)
        print(f"✅ Report saved to: {args.json}")

    if args.visualize is not None:
        return _visualize(pipeline, strategy, args.visualize)
    return 0


if __name__ == "__main__":
    sys.exit(main())
