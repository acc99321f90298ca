from __future__ import annotations

import asyncio
import io
import json
import unittest
from contextlib import redirect_stdout

from content_revival.application.extractor import (
    DEFAULT_METADATA,
    StreamingReportExtractor,
    process_stream,
)
from content_revival.domain.errors import (
    MALFORMED_PAYLOAD,
    NO_BLOCK_FOUND,
    AnalysisCancelled,
    ExtractionError,
)

PAYLOAD = {
    "originalVideoMetadata": {"title": "Redux in 2017", "publishDate": "2017-03-02", "currentViews": 1200},
    "segments": [
        {"startTime": "00:00", "endTime": "02:10", "summary": "Intro", "subjects": ["Redux"]},
    ],
    "outdatedItems": [
        {
            "subject": "State",
            "oldTool": "connect()",
            "newTool": "Redux Toolkit",
            "reason": "Less boilerplate",
            "impactScore": 7,
            "affectedSegmentIndices": [0],
        }
    ],
    "predictedViews": 9000,
    "predictedEngagement": 70,
}


def _block(payload, tag: str = "json") -> str:
    return f"```{tag}\n{json.dumps(payload)}\n```"


def _finalize(text: str):
    extractor = StreamingReportExtractor()
    extractor.feed(text)
    with redirect_stdout(io.StringIO()):
        return extractor.finalize()


class NarrativeTests(unittest.TestCase):
    def _run(self, fragments):
        seen = []
        extractor = StreamingReportExtractor(seen.append)
        for fragment in fragments:
            extractor.feed(fragment)
        return extractor, seen

    def test_provisional_narrative_grows_with_buffer(self) -> None:
        extractor, seen = self._run(["intro <thinking>", "Looking", " up views", " and dates"])
        self.assertEqual(seen[-1], "Looking up views and dates")
        post_tag = extractor.buffer.split("<thinking>", 1)[1]
        for value in seen:
            self.assertTrue(post_tag.startswith(value))

    def test_narrative_freezes_at_close_tag(self) -> None:
        extractor, seen = self._run(["<thinking>a", "b</thinking>", " tail", " more </thinking> text"])
        self.assertEqual(seen[-1], "ab")
        self.assertEqual(extractor.narrative, "ab")
        self.assertTrue(extractor.thinking_closed)
        self.assertEqual(seen.count("ab"), 1)

    def test_no_emission_without_open_tag(self) -> None:
        _, seen = self._run(["no tags here ", "</thinking> still none", "```json\n{}\n```"])
        self.assertEqual(seen, [])

    def test_tags_split_across_fragments(self) -> None:
        _, seen = self._run(["<thi", "nking>Step", " one</thin", "king> after"])
        self.assertEqual(seen[0], "Step")
        self.assertEqual(seen[-1], "Step one")

    def test_unchanged_narrative_is_not_reemitted(self) -> None:
        _, seen = self._run(["<thinking>x", "", None, "y"])
        self.assertEqual(seen, ["x", "xy"])

    def test_end_to_end_scenario(self) -> None:
        fragments = [
            "<thi",
            "nking>Step 1...",
            " Step 2.</thinking>",
            '```json\n{"segments":[],"outdatedItems":[],"predictedViews":100,"predictedEngagement":50}\n```',
        ]
        seen = []
        with redirect_stdout(io.StringIO()):
            strategy = process_stream(fragments, seen.append)

        self.assertEqual(seen[-1], "Step 1... Step 2.")
        self.assertEqual(strategy["segments"], [])
        self.assertEqual(strategy["outdatedItems"], [])
        self.assertEqual(strategy["predictedViews"], 100)
        self.assertEqual(strategy["predictedEngagement"], 50)
        self.assertEqual(strategy["originalVideoMetadata"], DEFAULT_METADATA)


class FinalizeTests(unittest.TestCase):
    def test_label_case_and_absence_do_not_matter(self) -> None:
        canonical = _finalize("<thinking>t</thinking>" + _block(PAYLOAD))
        for tag in ("JSON", "Json", ""):
            with self.subTest(tag=tag):
                self.assertEqual(_finalize(_block(PAYLOAD, tag)), canonical)

    def test_first_block_wins(self) -> None:
        second = dict(PAYLOAD, predictedViews=1)
        result = _finalize(_block(PAYLOAD) + "\n" + _block(second))
        self.assertEqual(result["predictedViews"], 9000)

    def test_wrapper_keys_are_unwrapped(self) -> None:
        direct = _finalize(_block(PAYLOAD))
        self.assertEqual(_finalize(_block({"RevivalStrategy": PAYLOAD})), direct)
        self.assertEqual(_finalize(_block({"revivalStrategy": PAYLOAD})), direct)

    def test_other_nesting_passes_through(self) -> None:
        deeper = {"result": {"RevivalStrategy": PAYLOAD}}
        result = _finalize(_block(deeper))
        self.assertIn("result", result)
        self.assertEqual(_finalize(_block([1, 2])), [1, 2])

    def test_missing_metadata_is_repaired(self) -> None:
        payload = {k: v for k, v in PAYLOAD.items() if k != "originalVideoMetadata"}
        extractor = StreamingReportExtractor()
        extractor.feed(_block(payload))
        out = io.StringIO()
        with redirect_stdout(out):
            result = extractor.finalize()

        self.assertEqual(result["originalVideoMetadata"], DEFAULT_METADATA)
        for key, value in payload.items():
            self.assertEqual(result[key], value)
        self.assertIn("Missing originalVideoMetadata", out.getvalue())

    def test_present_metadata_is_kept(self) -> None:
        result = _finalize(_block(PAYLOAD))
        self.assertEqual(result["originalVideoMetadata"]["title"], "Redux in 2017")

    def test_no_block_is_a_hard_failure(self) -> None:
        extractor = StreamingReportExtractor()
        extractor.feed("<thinking>done</thinking> but no data")
        with self.assertRaises(ExtractionError) as ctx:
            extractor.finalize()
        self.assertEqual(ctx.exception.reason, NO_BLOCK_FOUND)
        self.assertEqual(str(ctx.exception), "no structured block found")

    def test_empty_stream_has_no_block(self) -> None:
        with self.assertRaises(ExtractionError) as ctx:
            process_stream([])
        self.assertEqual(ctx.exception.reason, NO_BLOCK_FOUND)

    def test_malformed_payload_keeps_raw_text(self) -> None:
        extractor = StreamingReportExtractor()
        extractor.feed("```json\n{'segments': [,]}\n```")
        with self.assertRaises(ExtractionError) as ctx:
            extractor.finalize()
        self.assertEqual(ctx.exception.reason, MALFORMED_PAYLOAD)
        self.assertEqual(ctx.exception.raw, "{'segments': [,]}")

    def test_too_deeply_nested_payload_is_malformed(self) -> None:
        raw = "[" * 200000 + "]" * 200000
        extractor = StreamingReportExtractor()
        extractor.feed("```json\n" + raw + "\n```")
        with self.assertRaises(ExtractionError) as ctx:
            extractor.finalize()
        self.assertEqual(ctx.exception.reason, MALFORMED_PAYLOAD)
        self.assertEqual(ctx.exception.raw, raw)


class CancellationTests(unittest.TestCase):
    def test_cancel_stops_emission_and_finalize(self) -> None:
        seen = []
        extractor = StreamingReportExtractor(seen.append)
        extractor.feed("<thinking>one")
        extractor.cancel()
        extractor.feed(" two")
        self.assertEqual(seen, ["one"])
        self.assertEqual(extractor.buffer, "")
        with self.assertRaises(AnalysisCancelled):
            extractor.finalize()

    def test_cancel_during_consume(self) -> None:
        extractor = StreamingReportExtractor()
        closed = []

        def fragments():
            try:
                yield "<thinking>a"
                extractor.cancel()
                yield _block(PAYLOAD)
                yield "never read"
            finally:
                closed.append(True)

        stream = fragments()
        with self.assertRaises(AnalysisCancelled):
            extractor.consume(stream)
        self.assertEqual(closed, [True])
        self.assertEqual(list(stream), [])

    def test_keyboard_interrupt_discards_buffer(self) -> None:
        extractor = StreamingReportExtractor()

        def fragments():
            yield "<thinking>a"
            raise KeyboardInterrupt

        with self.assertRaises(KeyboardInterrupt):
            extractor.consume(fragments())
        self.assertTrue(extractor.cancelled)
        self.assertEqual(extractor.buffer, "")


class AsyncConsumeTests(unittest.TestCase):
    def test_async_matches_sync(self) -> None:
        fragments = ["<thinking>Research", " done</thinking>", _block(PAYLOAD)]

        async def stream():
            for fragment in fragments:
                await asyncio.sleep(0)
                yield fragment

        seen = []
        extractor = StreamingReportExtractor(seen.append)
        result = asyncio.run(extractor.aconsume(stream()))

        self.assertEqual(result, _finalize("".join(fragments)))
        self.assertEqual(seen[-1], "Research done")

    def test_task_cancellation_skips_finalize(self) -> None:
        seen = []
        extractor = StreamingReportExtractor(seen.append)

        async def stream():
            yield "<thinking>partial"
            await asyncio.sleep(10)
            yield _block(PAYLOAD)

        async def run():
            task = asyncio.ensure_future(extractor.aconsume(stream()))
            await asyncio.sleep(0.01)
            task.cancel()
            with self.assertRaises(asyncio.CancelledError):
                await task

        asyncio.run(run())
        self.assertTrue(extractor.cancelled)
        self.assertEqual(seen, ["partial"])

    def test_cancel_closes_async_stream(self) -> None:
        extractor = StreamingReportExtractor()
        closed = []

        async def stream():
            try:
                yield "<thinking>a"
                extractor.cancel()
                yield _block(PAYLOAD)
                yield "never read"
            finally:
                closed.append(True)

        async def run():
            gen = stream()
            with self.assertRaises(AnalysisCancelled):
                await extractor.aconsume(gen)
            # closed before the loop shuts down its async generators
            self.assertEqual(closed, [True])

        asyncio.run(run())


if __name__ == "__main__":
    unittest.main()
