"""LiteLLMJudgeHandler — the ``llm-judge`` evaluator type backed by LiteLLM."""

import json
import re
from typing import Any

import litellm

from cobalt.evaluator.domain.result import EvalContext, EvalResult
from cobalt.evaluator.domain.spec import EvaluatorSpec, LLMJudgeSpec
from cobalt.evaluator.infrastructure.errors import JudgeResponseError
from cobalt.evaluator.infrastructure.template import render_template

DEFAULT_JUDGE_MODEL = "gpt-4o-mini"

_BASE_INSTRUCTION = (
    "You are an AI evaluation judge. Your task is to evaluate AI agent outputs "
    "based on specific criteria."
)

_COT_INSTRUCTION = (
    "\n\nThink step by step before making your judgment. Provide your reasoning "
    'in the "chain_of_thought" field.'
)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def build_system_prompt(scoring: str, chain_of_thought: bool) -> str:
    """Return the judge system prompt for the scoring mode."""
    cot_field = (
        '\n  "chain_of_thought": "<your step-by-step reasoning>",'
        if chain_of_thought
        else ""
    )
    header = _BASE_INSTRUCTION + (_COT_INSTRUCTION if chain_of_thought else "")

    if scoring == "boolean":
        return (
            f"{header}\n\n"
            "IMPORTANT: You must respond with a valid JSON object in this exact format:\n"
            f"{{{cot_field}\n"
            '  "verdict": <true or false>,\n'
            '  "reason": "<brief explanation of your verdict>"\n'
            "}\n\n"
            '- "verdict": true if the output meets the criteria, false if it does not\n'
            '- "reason": a concise explanation\n'
            "Do not include any text outside the JSON object."
        )

    return (
        f"{header}\n\n"
        "IMPORTANT: You must respond with a valid JSON object in this exact format:\n"
        f"{{{cot_field}\n"
        '  "score": <number between 0.0 and 1.0>,\n'
        '  "reason": "<brief explanation>"\n'
        "}\n\n"
        "Do not include any text outside the JSON object."
    )


def parse_judge_response(evaluator: str, content: str, scoring: str) -> EvalResult:
    """Parse the judge's JSON answer into an EvalResult.

    Raises:
        JudgeResponseError: if the content is not JSON or lacks a usable verdict/score.
    """
    match = _JSON_OBJECT.search(content)
    try:
        parsed = json.loads(match.group(0) if match else content)
    except json.JSONDecodeError as exc:
        raise JudgeResponseError(
            evaluator=evaluator, reason=f"judge returned invalid JSON: {exc}"
        ) from exc
    if not isinstance(parsed, dict):
        raise JudgeResponseError(
            evaluator=evaluator, reason="judge response is not a JSON object"
        )

    reason = parsed.get("reason") or "No reason provided"
    chain_of_thought = parsed.get("chain_of_thought") or parsed.get("chainOfThought")
    raw_score = parsed.get("score")
    has_score = isinstance(raw_score, (int, float)) and not isinstance(raw_score, bool)

    if scoring == "boolean":
        verdict = parsed.get("verdict")
        if isinstance(verdict, bool):
            score = 1.0 if verdict else 0.0
        elif has_score:
            score = 1.0 if raw_score >= 0.5 else 0.0
        else:
            raise JudgeResponseError(
                evaluator=evaluator, reason="judge response has no boolean verdict"
            )
    else:
        if not has_score or not 0.0 <= raw_score <= 1.0:
            raise JudgeResponseError(
                evaluator=evaluator,
                reason=f"judge response has no score in [0, 1]: {raw_score!r}",
            )
        score = float(raw_score)

    return EvalResult(score=score, reason=reason, chain_of_thought=chain_of_thought)


def _template_context(context: EvalContext) -> dict[str, Any]:
    return {
        "input": context.item.get("input", context.item),
        "output": context.output,
        "expectedOutput": context.item.get("expectedOutput"),
        "metadata": context.metadata,
        **context.item,
    }


class LiteLLMJudgeHandler:
    """Scores an output by asking an LLM for a JSON verdict or score.

    Satisfies the EvaluatorHandler protocol structurally.
    """

    def __init__(
        self, temperature: float = 0.2, default_model: str = DEFAULT_JUDGE_MODEL
    ) -> None:
        self._temperature = temperature
        self._default_model = default_model

    async def __call__(
        self, spec: EvaluatorSpec, context: EvalContext, api_key: str | None
    ) -> EvalResult:
        """Render the prompt, invoke the judge model and parse its answer.

        Raises:
            JudgeResponseError: if the LLM call fails or the response is unusable.
        """
        judge = (
            spec
            if isinstance(spec, LLMJudgeSpec)
            else LLMJudgeSpec.model_validate(spec.model_dump())
        )
        chain_of_thought = (
            judge.chain_of_thought
            if judge.chain_of_thought is not None
            else judge.scoring == "boolean"
        )
        prompt = render_template(judge.prompt, _template_context(context))

        try:
            response = await litellm.acompletion(
                model=judge.model or self._default_model,
                temperature=self._temperature,
                api_key=api_key,
                response_format={"type": "json_object"},
                messages=[
                    {
                        "role": "system",
                        "content": build_system_prompt(judge.scoring, chain_of_thought),
                    },
                    {"role": "user", "content": prompt},
                ],
            )
        except Exception as exc:
            raise JudgeResponseError(evaluator=judge.name, reason=str(exc)) from exc

        content: str | None = response.choices[0].message.content
        if not content:
            raise JudgeResponseError(
                evaluator=judge.name, reason="judge returned an empty response"
            )
        return parse_judge_response(judge.name, content, judge.scoring)
