from __future__ import annotations

import unittest

from prepwise.integrations.claude import EvaluationGenerationError
from prepwise.schemas.interviews import InterviewEvaluation
from prepwise.services.evaluation_engine import (
    aggregate_rubric_scores,
    compile_interview_evaluation,
    merge_essay_evaluations,
    overall_from_rubric,
)
from tests.fakes import (
    FakeGenerationClient,
    make_essay_evaluation,
    make_response_evaluation,
    make_response_input,
    response_reply,
)


class AggregationTestCase(unittest.TestCase):
    def test_mean_per_dimension(self) -> None:
        rubric = aggregate_rubric_scores(
            [{"Leadership": 8, "Communication": 7}, {"Leadership": 6}],
        )
        self.assertEqual(rubric, {"Leadership": 7.0, "Communication": 7.0})
        self.assertEqual(overall_from_rubric(rubric), 7.0)

    def test_malformed_scores_are_skipped(self) -> None:
        rubric = aggregate_rubric_scores(
            [None, {"Leadership": float("nan"), "Fit": 6}, {"Fit": "x", "Impact": float("inf")}, "oops"],
        )
        self.assertEqual(rubric, {"Fit": 6.0})

    def test_overall_of_empty_rubric_is_zero(self) -> None:
        self.assertEqual(overall_from_rubric({}), 0.0)


class CompileInterviewEvaluationTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_empty_inputs_rejected(self) -> None:
        with self.assertRaises(ValueError):
            await compile_interview_evaluation([], FakeGenerationClient())

    async def test_two_question_scenario(self) -> None:
        client = FakeGenerationClient(
            replies={
                "Lead a team": response_reply(
                    {"Leadership": 9, "Communication": 8, "Clarity": 7, "Impact": 8, "Fit": 9}
                ),
                "Why our school": response_reply(
                    {"Leadership": 7, "Communication": 7, "Clarity": 7, "Impact": 7, "Fit": 7}
                ),
            },
        )
        inputs = [
            make_response_input("q1", "Lead a team"),
            make_response_input("q2", "Why our school"),
        ]

        evaluation = await compile_interview_evaluation(inputs, client)

        self.assertEqual(
            evaluation.rubric_scores,
            {"Leadership": 8.0, "Communication": 7.5, "Clarity": 7.0, "Impact": 7.5, "Fit": 8.0},
        )
        self.assertEqual(evaluation.overall_score, 7.6)
        self.assertEqual(len(evaluation.responses), 2)
        self.assertIsNone(evaluation.essay_evaluations)

    async def test_response_order_follows_inputs(self) -> None:
        reply = response_reply({"Leadership": 7})
        client = FakeGenerationClient(
            replies={"Prompt one": reply, "Prompt two": reply, "Prompt three": reply},
            delays={"Prompt one": 0.06, "Prompt two": 0.03, "Prompt three": 0.0},
        )
        inputs = [
            make_response_input("q1", "Prompt one"),
            make_response_input("q2", "Prompt two"),
            make_response_input("q3", "Prompt three"),
        ]

        evaluation = await compile_interview_evaluation(inputs, client)

        self.assertEqual([r.question_id for r in evaluation.responses], ["q1", "q2", "q3"])

    async def test_single_failure_aborts_compilation(self) -> None:
        client = FakeGenerationClient(
            replies={
                "Prompt one": response_reply({"Leadership": 7}),
                "Prompt two": "not json",
            },
        )
        inputs = [
            make_response_input("q1", "Prompt one"),
            make_response_input("q2", "Prompt two"),
        ]
        with self.assertRaises(EvaluationGenerationError):
            await compile_interview_evaluation(inputs, client)


class MergeEssayEvaluationsTestCase(unittest.TestCase):
    def _evaluation(self, *responses, rubric=None, overall=0.0) -> InterviewEvaluation:
        if rubric is None:
            rubric = aggregate_rubric_scores(r.scores for r in responses)
            overall = overall_from_rubric(rubric)
        return InterviewEvaluation(overall_score=overall, rubric_scores=rubric, responses=list(responses))

    def test_essay_dimensions_are_remapped(self) -> None:
        evaluation = self._evaluation(make_response_evaluation("q1", {"Communication": 6}))
        essay = make_essay_evaluation("e1", {"Writing Quality": 10, "Structure": 8})

        merged = merge_essay_evaluations(evaluation, [essay])

        self.assertIs(merged, evaluation)
        self.assertEqual(merged.rubric_scores, {"Communication": 8.0, "Clarity": 8.0})
        self.assertEqual(merged.overall_score, 8.0)
        self.assertEqual([e.essay_id for e in merged.essay_evaluations], ["e1"])

    def test_interview_and_essay_clarity_combine(self) -> None:
        evaluation = self._evaluation(
            make_response_evaluation("q1", {"Clarity": 6, "Impact": 7}),
            make_response_evaluation("q2", {"Clarity": 8, "Impact": 9}),
        )
        essay = make_essay_evaluation(
            "e1",
            {"Writing Quality": 9, "Clarity": 7, "Structure": 10, "Depth": 5, "Impact": 3},
        )

        merge_essay_evaluations(evaluation, [essay])

        self.assertEqual(
            evaluation.rubric_scores,
            {"Clarity": 8.0, "Impact": 6.0, "Communication": 8.0},
        )
        self.assertEqual(evaluation.overall_score, 7.33)

    def test_pre_merge_only_dimensions_survive(self) -> None:
        evaluation = self._evaluation(
            make_response_evaluation("q1", {"Fit": 6}),
            rubric={"Fit": 6.0, "Poise": 4.0},
            overall=5.0,
        )

        merge_essay_evaluations(evaluation, [make_essay_evaluation("e1", {"Depth": 8})])

        self.assertEqual(evaluation.rubric_scores, {"Fit": 6.0, "Poise": 4.0, "Impact": 8.0})
        self.assertEqual(evaluation.overall_score, 7.0)

    def test_unmapped_dimensions_are_dropped(self) -> None:
        evaluation = self._evaluation(rubric={"Fit": 6.5}, overall=6.5)

        merge_essay_evaluations(evaluation, [make_essay_evaluation("e1", {"Originality": 9})])

        self.assertEqual(evaluation.rubric_scores, {"Fit": 6.5})
        self.assertEqual(evaluation.overall_score, 6.5)
        self.assertEqual(len(evaluation.essay_evaluations), 1)

    def test_no_essays_is_a_no_op(self) -> None:
        evaluation = self._evaluation(make_response_evaluation("q1", {"Fit": 6}))

        merge_essay_evaluations(evaluation, [])

        self.assertEqual(evaluation.rubric_scores, {"Fit": 6.0})
        self.assertIsNone(evaluation.essay_evaluations)


if __name__ == "__main__":
    unittest.main()
