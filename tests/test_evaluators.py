from __future__ import annotations

import unittest

from prepwise.integrations.claude import EvaluationGenerationError
from prepwise.schemas.interviews import NonVerbalSignal, SpeechAnalyticsSnapshot
from prepwise.services.essay_evaluator import (
    count_words,
    evaluate_essay,
    evaluate_essays,
    word_count_status,
)
from prepwise.services.response_evaluator import build_response_prompt, evaluate_response
from tests.fakes import (
    FakeGenerationClient,
    essay_reply,
    make_essay_input,
    make_profile,
    make_response_input,
    response_reply,
)

FULL_SCORES = {"Leadership": 9, "Communication": 8, "Clarity": 7, "Impact": 8, "Fit": 9}


class ResponseEvaluatorTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_evaluates_response(self) -> None:
        client = FakeGenerationClient(default=response_reply(FULL_SCORES))
        evaluation_input = make_response_input("q1", "Tell me about a time you led.", transcript="  Raw transcript  ")

        evaluation = await evaluate_response(evaluation_input, client)

        self.assertEqual(evaluation.question_id, "q1")
        self.assertEqual(evaluation.transcript, "  Raw transcript  ")
        self.assertEqual(evaluation.scores, {k: float(v) for k, v in FULL_SCORES.items()})
        self.assertEqual(evaluation.overall_commentary, "Solid answer with a clear arc.")
        self.assertEqual(evaluation.tone_analysis, "Warm and steady delivery.")
        self.assertEqual(evaluation.strengths, ["Specific example", "Quantified result"])
        self.assertIsNone(evaluation.non_verbal_analysis)
        self.assertEqual(len(client.calls), 1)

    async def test_repairs_partial_payload(self) -> None:
        reply = "```json\n" + response_reply(
            {"Leadership": "8.5", "Clarity": None, "Impact": 14},
            tone_analysis=None,
        ) + "\n```"
        client = FakeGenerationClient(default=reply)

        evaluation = await evaluate_response(make_response_input("q1", "Why this school?"), client)

        self.assertEqual(
            evaluation.scores,
            {"Leadership": 8.5, "Clarity": 5.0, "Impact": 10.0, "Communication": 5.0, "Fit": 5.0},
        )
        self.assertEqual(evaluation.tone_analysis, "Tone analysis not available for this response.")

    async def test_non_verbal_placeholder_when_signals_present(self) -> None:
        client = FakeGenerationClient(default=response_reply(FULL_SCORES))
        evaluation_input = make_response_input(
            "q1",
            "Describe a conflict.",
            non_verbal_signals=[NonVerbalSignal(label="Eye contact", score=7, notes="steady")],
        )

        evaluation = await evaluate_response(evaluation_input, client)

        self.assertEqual(evaluation.non_verbal_analysis, "Non-verbal analysis not available for this response.")
        self.assertIn("Eye contact: 7/10 (steady)", client.calls[0][1])

    async def test_oversized_scores_are_clamped(self) -> None:
        reply = '{"rubric_scores": {"Leadership": 1' + "0" * 400 + ', "Fit": -1' + "0" * 400 + "}}"
        client = FakeGenerationClient(default=reply)

        evaluation = await evaluate_response(make_response_input("q1", "Why MBA?"), client)

        self.assertEqual(evaluation.scores["Leadership"], 10.0)
        self.assertEqual(evaluation.scores["Fit"], 0.0)
        self.assertEqual(evaluation.overall_commentary, "")

    async def test_empty_reply_is_fatal(self) -> None:
        client = FakeGenerationClient(default="   ")
        with self.assertRaises(EvaluationGenerationError):
            await evaluate_response(make_response_input("q1", "Why MBA?"), client)

    async def test_invalid_json_is_fatal(self) -> None:
        client = FakeGenerationClient(default="I'm sorry, I can't score this.")
        with self.assertRaises(EvaluationGenerationError):
            await evaluate_response(make_response_input("q1", "Why MBA?"), client)

    def test_prompt_includes_signals_and_limits_highlights(self) -> None:
        bullets = [f"Highlight {i}" for i in range(8)]
        evaluation_input = make_response_input(
            "q1",
            "Tell me about a failure.",
            profile=make_profile(summary_bullets=bullets),
            speech=SpeechAnalyticsSnapshot(
                transcript="I failed once.",
                filler_word_count=4,
                speaking_rate_wpm=150,
                sentiment="positive",
                confidence=0.91,
            ),
        )

        prompt = build_response_prompt(evaluation_input)

        self.assertIn("Question: Tell me about a failure.", prompt)
        self.assertIn("Focus Areas: Leadership, Impact", prompt)
        self.assertIn("Filler Words: 4", prompt)
        self.assertIn("Sentiment: positive", prompt)
        self.assertIn("Speech Recognition Confidence: 91.0%", prompt)
        self.assertNotIn("Average Pitch", prompt)
        self.assertIn("No non-verbal data available", prompt)
        self.assertIn("Highlight 4", prompt)
        self.assertNotIn("Highlight 5", prompt)


class EssayEvaluatorTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_word_count_is_computed_locally(self) -> None:
        client = FakeGenerationClient(
            default=essay_reply({"Writing Quality": 8, "Depth": "7"}, word_count=999),
        )
        essay = make_essay_input("e1", "Why an MBA?", "  I want   to\nlead\tteams.  ")

        evaluation = await evaluate_essay(essay, client)

        self.assertEqual(evaluation.word_count, 5)
        self.assertEqual(evaluation.essay_id, "e1")
        self.assertEqual(evaluation.prompt, "Why an MBA?")
        self.assertEqual(evaluation.overall_commentary, "Thoughtful essay.")
        self.assertEqual(evaluation.content, "  I want   to\nlead\tteams.  ")
        self.assertEqual(
            evaluation.scores,
            {"Writing Quality": 8.0, "Depth": 7.0, "Clarity": 5.0, "Structure": 5.0, "Impact": 5.0},
        )

    async def test_missing_narratives_use_essay_placeholders(self) -> None:
        client = FakeGenerationClient(default=essay_reply({}, depth_analysis=""))
        evaluation = await evaluate_essay(make_essay_input("e1", "Goals?", "Short essay."), client)
        self.assertEqual(evaluation.depth_analysis, "Depth analysis not available for this essay.")

    async def test_empty_input_skips_generation(self) -> None:
        client = FakeGenerationClient()
        self.assertEqual(await evaluate_essays([], client), [])
        self.assertEqual(client.calls, [])

    async def test_results_follow_input_order(self) -> None:
        client = FakeGenerationClient(
            replies={
                "Essay A prompt": essay_reply({"Depth": 9}),
                "Essay B prompt": essay_reply({"Depth": 4}),
            },
            delays={"Essay A prompt": 0.05},
        )
        inputs = [
            make_essay_input("a", "Essay A prompt", "First essay"),
            make_essay_input("b", "Essay B prompt", "Second essay"),
        ]

        evaluations = await evaluate_essays(inputs, client)

        self.assertEqual([e.essay_id for e in evaluations], ["a", "b"])
        self.assertEqual(evaluations[0].scores["Depth"], 9.0)

    async def test_failure_propagates(self) -> None:
        client = FakeGenerationClient(
            replies={
                "Essay A prompt": essay_reply({}),
                "Essay B prompt": EvaluationGenerationError("timed out"),
            },
        )
        inputs = [
            make_essay_input("a", "Essay A prompt", "First essay"),
            make_essay_input("b", "Essay B prompt", "Second essay"),
        ]
        with self.assertRaises(EvaluationGenerationError):
            await evaluate_essays(inputs, client)


class WordCountTestCase(unittest.TestCase):
    def test_count_words(self) -> None:
        self.assertEqual(count_words(""), 0)
        self.assertEqual(count_words("one two\n\nthree"), 3)

    def test_word_count_status(self) -> None:
        self.assertIn("below minimum", word_count_status(200, 300))
        self.assertIn("exceeds maximum", word_count_status(520, 500))
        self.assertIn("within acceptable range", word_count_status(260, 300))


if __name__ == "__main__":
    unittest.main()
